"""Domain types and helpers for catalog entries and administrators."""
from __future__ import annotations

import unicodedata
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping


def utc_timestamp() -> str:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-01-01T10:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_entry_id(value: Any) -> int | None:
    """Return a positive integer id or None for anything that is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    text = str(value or "").strip()
    if not (text.isascii() and text.isdigit()):
        return None
    parsed = int(text)
    return parsed if parsed > 0 else None


def name_sort_key(name: str | None) -> tuple[str, str]:
    """Locale-style ordering: accents and case only break ties, lowercase first."""
    raw = name or ""
    decomposed = unicodedata.normalize("NFKD", raw)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), raw.swapcase()


@dataclass
class Administrator:
    id: int
    username: str
    password: str
    created_at: str = field(default_factory=utc_timestamp)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Administrator":
        return cls(
            id=int(data["id"]),
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
            created_at=str(data.get("created_at") or utc_timestamp()),
        )


@dataclass
class DiseaseEntry:
    id: int
    name: str
    treatment: str
    description: str = ""
    symptoms: str = ""
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "symptoms": self.symptoms,
            "treatment": self.treatment,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiseaseEntry":
        created = str(data.get("created_at") or "")
        return cls(
            id=int(data["id"]),
            name=str(data.get("name") or ""),
            treatment=str(data.get("treatment") or ""),
            description=str(data.get("description") or ""),
            symptoms=str(data.get("symptoms") or ""),
            created_at=created,
            updated_at=str(data.get("updated_at") or created),
        )

    def matches(self, query: str) -> bool:
        """Case-insensitive substring match on name, description or symptoms."""
        needle = (query or "").casefold()
        if not needle:
            return True
        for value in (self.name, self.description, self.symptoms):
            if value and needle in value.casefold():
                return True
        return False


def sort_entries(entries) -> list[DiseaseEntry]:
    """Sorted copy; sorted() is stable so equal names keep insertion order."""
    return sorted(entries, key=lambda entry: name_sort_key(entry.name))

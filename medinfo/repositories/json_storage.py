"""
JSON document persistence adapter.

The whole catalog lives in one pretty-printed document:

    {"admins": [...], "diseases": [...], "nextId": 1}

It is loaded once, mirrored in memory, and rewritten in full after every
mutation. Mutations and the following write go through a single writer lock.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
import json
import threading

from medinfo.core.config import Settings, get_settings
from medinfo.core.logging import get_logger
from medinfo.core.security import hash_password
from medinfo.domain import Administrator, DiseaseEntry, parse_entry_id, sort_entries, utc_timestamp

from .base import default_admin_credentials
from .errors import (
    AdministratorExistsError,
    AdministratorNotFoundError,
    EntryNotFoundError,
    StorageError,
)

logger = get_logger("store.json")


def load(path: Path) -> dict | None:
    """Read the document; None when the file does not exist."""
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def save(path: Path, db: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(db, ensure_ascii=False, indent=2), encoding="utf-8")


def db_defaults(db: dict) -> dict:
    db.setdefault("admins", [])
    db.setdefault("diseases", [])
    db.setdefault("nextId", 1)
    return db


class JsonRecordStore:
    """Record store backed by a single JSON file."""

    def __init__(self, path: Path | str | None = None, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.path = Path(path) if path else self.settings.data_file
        self._lock = threading.RLock()
        self._admins: dict[int, Administrator] = {}
        self._entries: dict[int, DiseaseEntry] = {}
        self._next_id = 1

    # -------------------------- document --------------------------
    def initialize(self) -> None:
        with self._lock:
            try:
                raw = load(self.path)
                if raw is None:
                    raise FileNotFoundError(str(self.path))
                self._apply(raw)
            except (OSError, ValueError, TypeError, KeyError) as exc:
                if isinstance(exc, FileNotFoundError):
                    logger.info("Creating new database at %s", self.path)
                else:
                    logger.warning("Unreadable database at %s (%s); starting fresh", self.path, exc)
                self._admins, self._entries, self._next_id = {}, {}, 1
                self._create_default_admin()
                self._persist()
                return
            logger.info("Database loaded from %s (%d entries)", self.path, len(self._entries))
            if not self._admins:
                self._create_default_admin()
                self._persist()

    def _apply(self, raw: dict) -> None:
        if not isinstance(raw, dict):
            raise ValueError("document root must be an object")
        db_defaults(raw)
        admins = {}
        for item in raw["admins"]:
            admin = Administrator.from_dict(item)
            admins[admin.id] = admin
        entries = {}
        for item in raw["diseases"]:
            entry = DiseaseEntry.from_dict(item)
            entries[entry.id] = entry
        next_id = int(raw["nextId"])
        if entries:
            next_id = max(next_id, max(entries) + 1)
        self._admins, self._entries, self._next_id = admins, entries, max(1, next_id)

    def export_document(self) -> dict:
        with self._lock:
            return {
                "admins": [admin.to_dict() for admin in self._admins.values()],
                "diseases": [entry.to_dict() for entry in self._entries.values()],
                "nextId": self._next_id,
            }

    def _persist(self) -> None:
        try:
            save(self.path, self.export_document())
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            raise StorageError("Could not write the catalog document") from exc

    # -------------------------- admins --------------------------
    def _create_default_admin(self) -> None:
        username, password = default_admin_credentials(self.settings)
        self._insert_admin(username, password)

    def _insert_admin(self, username: str, password: str) -> Administrator:
        admin_id = max(self._admins, default=0) + 1
        admin = Administrator(id=admin_id, username=username, password=hash_password(password))
        self._admins[admin_id] = admin
        return admin

    def _find_admin(self, username: str) -> Administrator | None:
        for admin in self._admins.values():
            if admin.username == username:
                return admin
        return None

    def find_administrator(self, username: str) -> Administrator | None:
        with self._lock:
            admin = self._find_admin(username)
            return replace(admin) if admin else None

    def add_administrator(self, username: str, password: str) -> Administrator:
        with self._lock:
            if self._find_admin(username):
                raise AdministratorExistsError(username)
            admin = self._insert_admin(username, password)
            self._persist()
            return replace(admin)

    def set_administrator_password(self, username: str, password: str) -> None:
        with self._lock:
            admin = self._find_admin(username)
            if not admin:
                raise AdministratorNotFoundError(username)
            admin.password = hash_password(password)
            self._persist()

    # -------------------------- diseases --------------------------
    def list_entries(self) -> list[DiseaseEntry]:
        with self._lock:
            return sort_entries(replace(entry) for entry in self._entries.values())

    def get_entry(self, entry_id) -> DiseaseEntry | None:
        key = parse_entry_id(entry_id)
        if key is None:
            return None
        with self._lock:
            entry = self._entries.get(key)
            return replace(entry) if entry else None

    def search_entries(self, query: str | None) -> list[DiseaseEntry]:
        with self._lock:
            return sort_entries(
                replace(entry) for entry in self._entries.values() if entry.matches(query or "")
            )

    def add_entry(self, name: str, description: str | None, symptoms: str | None, treatment: str) -> int:
        with self._lock:
            entry_id = self._next_id
            self._next_id += 1
            now = utc_timestamp()
            self._entries[entry_id] = DiseaseEntry(
                id=entry_id,
                name=name,
                description=description or "",
                symptoms=symptoms or "",
                treatment=treatment,
                created_at=now,
                updated_at=now,
            )
            self._persist()
            return entry_id

    def update_entry(
        self, entry_id, name: str, description: str | None, symptoms: str | None, treatment: str
    ) -> int:
        key = parse_entry_id(entry_id)
        with self._lock:
            entry = self._entries.get(key) if key is not None else None
            if entry is None:
                raise EntryNotFoundError(entry_id)
            entry.name = name
            entry.description = description or ""
            entry.symptoms = symptoms or ""
            entry.treatment = treatment
            entry.updated_at = max(utc_timestamp(), entry.created_at)
            self._persist()
            return 1

    def delete_entry(self, entry_id) -> int:
        key = parse_entry_id(entry_id)
        with self._lock:
            if key is None or key not in self._entries:
                raise EntryNotFoundError(entry_id)
            del self._entries[key]
            self._persist()
            return 1

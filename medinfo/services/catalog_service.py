"""Catalog use cases: browsing, searching and editing disease entries."""

from __future__ import annotations

from dataclasses import dataclass

from medinfo.domain import DiseaseEntry
from medinfo.repositories import RecordStore


class InvalidEntryError(Exception):
    """Raised when a submitted entry lacks a name or a treatment."""


@dataclass
class EntryInput:
    name: str
    treatment: str
    description: str = ""
    symptoms: str = ""


class CatalogService:
    """Thin layer over the record store that validates admin input."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    def list_entries(self) -> list[DiseaseEntry]:
        return self.store.list_entries()

    def get_entry(self, entry_id) -> DiseaseEntry | None:
        return self.store.get_entry(entry_id)

    def search(self, query: str | None) -> list[DiseaseEntry]:
        if not (query or "").strip():
            return self.store.list_entries()
        return self.store.search_entries(query)

    def _validate(self, data: EntryInput) -> EntryInput:
        if not (data.name or "").strip():
            raise InvalidEntryError("Name is required")
        if not (data.treatment or "").strip():
            raise InvalidEntryError("Treatment is required")
        return data

    def add_entry(self, data: EntryInput) -> int:
        data = self._validate(data)
        return self.store.add_entry(data.name, data.description, data.symptoms, data.treatment)

    def update_entry(self, entry_id, data: EntryInput) -> int:
        data = self._validate(data)
        return self.store.update_entry(entry_id, data.name, data.description, data.symptoms, data.treatment)

    def delete_entry(self, entry_id) -> int:
        return self.store.delete_entry(entry_id)

"""Record store port shared by the JSON and SQL backends."""
from __future__ import annotations

from typing import Protocol

from medinfo.core.config import Settings
from medinfo.core.logging import get_logger
from medinfo.core.security import generate_password
from medinfo.domain import Administrator, DiseaseEntry

logger = get_logger("store")


class RecordStore(Protocol):
    """Port for catalog persistence."""

    def initialize(self) -> None: ...

    def find_administrator(self, username: str) -> Administrator | None: ...

    def add_administrator(self, username: str, password: str) -> Administrator: ...

    def set_administrator_password(self, username: str, password: str) -> None: ...

    def list_entries(self) -> list[DiseaseEntry]: ...

    def get_entry(self, entry_id) -> DiseaseEntry | None: ...

    def search_entries(self, query: str | None) -> list[DiseaseEntry]: ...

    def add_entry(self, name: str, description: str | None, symptoms: str | None, treatment: str) -> int: ...

    def update_entry(
        self, entry_id, name: str, description: str | None, symptoms: str | None, treatment: str
    ) -> int: ...

    def delete_entry(self, entry_id) -> int: ...

    def export_document(self) -> dict: ...


def default_admin_credentials(settings: Settings) -> tuple[str, str]:
    """Username/password for the bootstrap administrator.

    A random password is generated (and logged once) when none is configured.
    """
    username = settings.default_admin_username or "admin"
    password = settings.default_admin_password
    if not password:
        password = generate_password()
        logger.warning("Default admin created (username: %s, password: %s)", username, password)
    else:
        logger.info("Default admin created (username: %s)", username)
    return username, password

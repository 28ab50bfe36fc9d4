"""
Persistence adapters.

These modules encapsulate how catalog data is stored/retrieved (a JSON document
by default, or a SQL database). Services depend on the RecordStore port rather
than touching the file or the engine.
"""

from __future__ import annotations

from medinfo.core.config import Settings, get_settings

from .base import RecordStore


def get_record_store(settings: Settings | None = None) -> RecordStore:
    """Build the backend selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    if settings.storage_backend == "sql":
        from .sql_repository import SQLRecordStore

        return SQLRecordStore(settings=settings)
    from .json_storage import JsonRecordStore

    return JsonRecordStore(settings=settings)


__all__ = ["RecordStore", "get_record_store"]

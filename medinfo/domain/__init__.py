"""Domain types (entries, administrators) and pure helpers."""

from .diseases import (
    Administrator,
    DiseaseEntry,
    name_sort_key,
    parse_entry_id,
    sort_entries,
    utc_timestamp,
)

__all__ = [
    "Administrator",
    "DiseaseEntry",
    "name_sort_key",
    "parse_entry_id",
    "sort_entries",
    "utc_timestamp",
]

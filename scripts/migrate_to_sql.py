"""One-off migration script: JSON catalog document (data.json) -> SQL backend."""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# make the medinfo package importable when run directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from medinfo.core.config import get_settings  # noqa: E402
from medinfo.db.create_tables import create_all  # noqa: E402
from medinfo.repositories.json_storage import db_defaults  # noqa: E402
from medinfo.repositories.sql_repository import SQLRecordStore  # noqa: E402


def _load_json(path: Path) -> dict:
    if not path.exists():
        raise SystemExit(f"File not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        return db_defaults(json.load(f))


def migrate(source: Path, database_url: str | None = None) -> dict:
    document = _load_json(source)
    store = SQLRecordStore(url=database_url)
    create_all(store.url)
    store.import_document(document)
    return store.export_document()


if __name__ == "__main__":
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Copy the JSON catalog into the SQL database")
    ap.add_argument("--source", default=str(settings.data_file), help="JSON document to read")
    ap.add_argument("--database-url", default=settings.database_url, help="Target SQLAlchemy URL")
    args = ap.parse_args()
    result = migrate(Path(args.source), args.database_url)
    print(
        f"Migrated {len(result['admins'])} admins and {len(result['diseases'])} diseases "
        f"(nextId={result['nextId']})."
    )

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# make the medinfo package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from medinfo.core import config as core_config  # noqa: E402
from medinfo.core.rate_limiter import reset_limits  # noqa: E402
from medinfo.db import session as db_session  # noqa: E402
from medinfo.repositories.json_storage import JsonRecordStore  # noqa: E402
from medinfo.repositories.sql_repository import SQLRecordStore  # noqa: E402

ADMIN_USERNAME = "curator"
ADMIN_PASSWORD = "correct-horse-battery"


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def settings(tmp_path, monkeypatch):
    """Settings pointing at a temporary data directory; caches are reset around the test."""
    monkeypatch.setenv("DATA_FILE", str(tmp_path / "data.json"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'catalog.db'}")
    monkeypatch.setenv("DEFAULT_ADMIN_USERNAME", ADMIN_USERNAME)
    monkeypatch.setenv("DEFAULT_ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("STORAGE_BACKEND", raising=False)
    monkeypatch.delenv("LOGIN_RATE_LIMIT", raising=False)
    _clear_caches()
    reset_limits()
    current = core_config.get_settings()
    yield current
    try:
        db_session.get_engine(current.database_url).dispose()
    except Exception:
        pass
    _clear_caches()
    reset_limits()


@pytest.fixture()
def json_store(settings):
    store = JsonRecordStore(settings=settings)
    store.initialize()
    return store


@pytest.fixture()
def sql_store(settings):
    store = SQLRecordStore(settings=settings)
    store.initialize()
    return store


@pytest.fixture()
def write_document(settings):
    """Write a raw document to the configured data file."""

    def _write(document: dict) -> Path:
        path = settings.data_file
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return path

    return _write

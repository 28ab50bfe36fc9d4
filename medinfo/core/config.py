"""
Configuration helpers for the medinfo backend.

Settings are read once from the environment (storage location, backend choice,
session lifetime, bootstrap administrator) so that routers/services do not fetch
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_file: Path
    storage_backend: str
    database_url: str
    session_ttl_seconds: int
    default_admin_username: str
    default_admin_password: str
    cors_origins: tuple[str, ...]
    log_level: str
    login_rate_limit: int
    login_rate_window_seconds: int
    host: str
    port: int


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None) -> tuple[str, ...]:
        return tuple(item.strip().rstrip("/") for item in (value or "").split(",") if item.strip())

    backend = (os.getenv("STORAGE_BACKEND") or "json").strip().lower()
    if backend not in {"json", "sql"}:
        backend = "json"
    data_file = Path(os.getenv("DATA_FILE") or DEFAULT_DATA_FILE)
    default_db = f"sqlite:///{data_file.with_suffix('.db')}"

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        data_file=data_file,
        storage_backend=backend,
        database_url=(os.getenv("DATABASE_URL") or default_db).strip(),
        session_ttl_seconds=max(60, _int(os.getenv("SESSION_TTL_SECONDS", "43200"), 43200)),
        default_admin_username=(os.getenv("DEFAULT_ADMIN_USERNAME") or "admin").strip(),
        default_admin_password=os.getenv("DEFAULT_ADMIN_PASSWORD", ""),
        cors_origins=_csv(os.getenv("CORS_ORIGINS")),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        login_rate_limit=_int(os.getenv("LOGIN_RATE_LIMIT", "10"), 10),
        login_rate_window_seconds=_int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", "300"), 300),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "3000"), 3000),
    )

"""Run the catalog with uvicorn: ``python -m medinfo``."""
from __future__ import annotations

import os

import uvicorn

from medinfo.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "medinfo.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.app_env == "dev" and os.getenv("RELOAD") == "1",
    )


if __name__ == "__main__":
    main()

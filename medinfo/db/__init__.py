"""Database helpers for the SQL record store (engine/session export)."""

from .session import Base, get_engine, get_session

__all__ = ["Base", "get_engine", "get_session"]

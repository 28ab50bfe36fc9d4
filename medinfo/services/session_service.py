"""Admin session helpers (issue tokens, cookies, validation)."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

from fastapi import Request, Response

from medinfo.core.config import get_settings
from medinfo.core.logging import get_logger
from medinfo.core.security import hash_password, is_legacy_hash, new_session_token, verify_password
from medinfo.repositories import RecordStore
from medinfo.repositories.errors import StorageError

SESSION_COOKIE_NAME = "admin_session"

logger = get_logger("auth")


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class InvalidCredentialsError(AuthError):
    pass


class AuthenticationRequiredError(AuthError):
    pass


@dataclass(frozen=True)
class AdminSession:
    token: str
    admin_id: int
    username: str
    expires_at: datetime


@lru_cache
def _dummy_hash() -> str:
    # verified against for unknown usernames so both failures cost the same
    return hash_password(new_session_token())


class AccessGate:
    """Validates admin credentials and tracks the sessions issued for them."""

    def __init__(self, store: RecordStore, ttl_seconds: int | None = None) -> None:
        self.store = store
        self.ttl_seconds = max(60, ttl_seconds or get_settings().session_ttl_seconds)
        self._sessions: dict[str, AdminSession] = {}
        self._lock = threading.Lock()

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def login(self, username: str | None, password: str | None) -> str:
        admin = self.store.find_administrator(username or "") if username else None
        if admin is None:
            verify_password(password or "", _dummy_hash())
            logger.info("Rejected login for unknown admin")
            raise InvalidCredentialsError()
        if not verify_password(password or "", admin.password):
            logger.info("Rejected login for admin %s", admin.username)
            raise InvalidCredentialsError()
        if is_legacy_hash(admin.password):
            self._upgrade_hash(admin.username, password or "")
        token = new_session_token()
        session = AdminSession(
            token=token,
            admin_id=admin.id,
            username=admin.username,
            expires_at=self._now() + timedelta(seconds=self.ttl_seconds),
        )
        with self._lock:
            self._sweep_expired(self._now())
            self._sessions[token] = session
        logger.info("Admin %s logged in", admin.username)
        return token

    def _upgrade_hash(self, username: str, password: str) -> None:
        try:
            self.store.set_administrator_password(username, password)
        except StorageError:
            logger.warning("Could not re-hash legacy password for admin %s", username)
            return
        logger.info("Re-hashed legacy password for admin %s", username)

    def _sweep_expired(self, now: datetime) -> None:
        expired = [token for token, session in self._sessions.items() if session.expires_at < now]
        for token in expired:
            del self._sessions[token]

    def logout(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            session = self._sessions.pop(token, None)
        if session:
            logger.info("Admin %s logged out", session.username)

    def revoke_all(self) -> None:
        with self._lock:
            self._sessions.clear()

    def current_session(self, token: str | None) -> AdminSession | None:
        if not token:
            return None
        now = self._now()
        with self._lock:
            session = self._sessions.get(token)
            if session and session.expires_at < now:
                del self._sessions[token]
                return None
            return session

    def is_authenticated(self, token: str | None) -> bool:
        return self.current_session(token) is not None

    def require_session(self, token: str | None) -> AdminSession:
        session = self.current_session(token)
        if session is None:
            raise AuthenticationRequiredError()
        return session


def session_token(request: Request) -> str | None:
    return request.cookies.get(SESSION_COOKIE_NAME)


def set_session_cookie(response: Response, token: str, max_age: int, *, secure: bool = False) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=secure,
        samesite="strict",
        max_age=max_age,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")

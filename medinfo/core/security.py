"""Security helpers (hashing and verification)."""

from __future__ import annotations

import secrets

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"
# hashes written by earlier catalog deployments (bcryptjs)
_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def is_legacy_hash(stored_hash: str | None) -> bool:
    return (stored_hash or "").startswith(_BCRYPT_PREFIXES)


def _verify_legacy(password: str, stored: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        return False


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if is_legacy_hash(stored):
        return _verify_legacy(password or "", stored)
    if not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, password or "")
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def generate_password(length: int = 16) -> str:
    """Random password for bootstrap accounts."""
    return secrets.token_urlsafe(length)[:length]


def new_session_token() -> str:
    return secrets.token_urlsafe(32)

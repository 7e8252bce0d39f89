"""Security helpers (hashing, verification and one-time codes)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    hashed = stored[len(_PREFIX) :]
    try:
        return _ph.verify(hashed, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def new_otp_code() -> str:
    """Four digit code, 1000-9999."""
    return str(1000 + secrets.randbelow(9000))


def codes_match(expected: str | None, supplied: str | None) -> bool:
    return secrets.compare_digest((expected or "").encode(), (supplied or "").encode())

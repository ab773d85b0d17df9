"""Password hashing and access token helpers.

Passwords are hashed with a passlib ``CryptContext`` built from
``AUTH_PASSWORD_SCHEMES``; the first scheme hashes new passwords and the
others are still accepted for verification. Access tokens are HS256 JWTs
signed with ``AUTH_JWT_SECRET``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt
from passlib.context import CryptContext

from app.core.config import settings


@lru_cache(maxsize=8)
def _build_context(schemes: str) -> CryptContext:
    names = [name.strip() for name in schemes.split(",") if name.strip()]
    return CryptContext(schemes=names, deprecated="auto")


def get_password_context() -> CryptContext:
    """Return the passlib context for the configured schemes."""

    return _build_context(settings.auth.password_schemes)


def hash_password(password: str) -> str:
    """Hash a plain-text password with the default scheme."""

    return get_password_context().hash(password)


def verify_password(password: str, hashed_password: str | None) -> bool:
    """Check a plain-text password against a stored hash.

    When there is no stored hash (unknown user), a dummy verification still
    runs so the response time does not reveal whether the account exists.

    Args:
        password: Password supplied by the client.
        hashed_password: Stored hash, or None when no account matched.

    Returns:
        True only when a stored hash exists and matches.
    """

    context = get_password_context()
    if not hashed_password:
        context.dummy_verify()
        return False
    try:
        return context.verify(password, hashed_password)
    except (ValueError, TypeError):
        # Unrecognised or corrupt hash
        return False


def create_access_token(user_id: str, email: str, *, now: datetime | None = None) -> str:
    """Issue a signed access token for an authenticated user.

    Args:
        user_id: Stored user id, used as the ``sub`` claim.
        email: User email, embedded for convenience.
        now: Issue time override (tests).

    Returns:
        Encoded JWT string.
    """

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.auth.token_expire_minutes),
    }
    return jwt.encode(payload, settings.auth.jwt_secret, algorithm=settings.auth.jwt_algorithm)


def decode_access_token(token: str) -> dict | None:
    """Decode and verify an access token.

    Counterpart of ``create_access_token`` for services that accept the
    tokens issued at login; this API itself authorizes with API keys.

    Returns:
        The claims when the signature and expiry are valid, otherwise None.
    """

    try:
        return jwt.decode(
            token,
            settings.auth.jwt_secret,
            algorithms=[settings.auth.jwt_algorithm],
        )
    except jwt.PyJWTError:
        return None

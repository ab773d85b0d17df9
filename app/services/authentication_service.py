"""Login flow guarded by the failed-login throttle.

The throttle is consulted before any credential check. A locked-out email is
refused even if the password is right. Every completed credential check is
reported back to the throttle, so failures accumulate and a success clears
them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.adapters.throttle.base import AbstractLoginThrottle, LoginOutcome
from app.core.errors import (
    AuthenticationAppError,
    LoginThrottledAppError,
    PersistenceAppError,
    UnprocessableEntityAppError,
)
from app.core.logging import hash_identifier
from app.core.security import create_access_token, verify_password
from app.services.users_service import UsersService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    """Public view of an authenticated user plus the issued access token."""

    user_id: str
    email: str
    name: str
    token: str


class AuthenticationService:
    """Verify credentials under the protection of a login throttle."""

    def __init__(self, users: UsersService, throttle: AbstractLoginThrottle) -> None:
        self._users = users
        self._throttle = throttle

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate a user by email and password.

        Args:
            email: Login identifier.
            password: Plain-text password.

        Returns:
            LoginResult for the authenticated user.

        Raises:
            LoginThrottledAppError: Too many recent failures for ``email``.
            AuthenticationAppError: Wrong email or password.
            UnprocessableEntityAppError: The user store could not be read.
        """
        email_hash = hash_identifier(email)

        decision = self._throttle.check(email)
        if not decision.allowed:
            logger.warning(
                "login.throttled",
                extra={
                    "email_hash": email_hash,
                    "fail_count": decision.fail_count,
                    "retry_after_s": decision.retry_after_seconds,
                },
            )
            raise LoginThrottledAppError(
                code="too_many_failed_login_attempts",
                message="Too many failed login attempts. Please try again later.",
                details={"retry_after": decision.retry_after_seconds or 0},
            )

        try:
            user = await self._users.get_user_by_email(email)
        except PersistenceAppError as exc:
            logger.error("login.lookup_failed", extra={"email_hash": email_hash, "error_code": exc.code})
            raise UnprocessableEntityAppError(
                code="login_failed",
                message="Unable to process login at this time",
            ) from exc

        password_ok = verify_password(password, user.get("password") if user else None)

        if user is None or not password_ok:
            self._throttle.record(email, LoginOutcome.FAILURE)
            logger.warning(
                "login.invalid_credentials",
                extra={"email_hash": email_hash, "fail_count": self._throttle.failure_count(email)},
            )
            raise AuthenticationAppError(
                code="invalid_credentials",
                message="Wrong email or password",
            )

        self._throttle.record(email, LoginOutcome.SUCCESS)
        logger.info("login.success", extra={"user_id": user["id"]})

        return LoginResult(
            user_id=user["id"],
            email=user["email"],
            name=user.get("name", ""),
            token=create_access_token(user["id"], user["email"]),
        )

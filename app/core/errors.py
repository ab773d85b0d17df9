"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep error payloads small.
    """

    hint: str
    resource: str
    resource_id: str
    collection: str
    field: str
    retry_after: int
    errors: list[dict[str, Any]]
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class AuthenticationAppError(AppError):
    """Raised when credentials or API keys are rejected."""


class LoginThrottledAppError(AppError):
    """Raised when an identifier is locked out after repeated failed logins."""


class UnprocessableEntityAppError(AppError):
    """Raised when a resource operation could not be carried out."""


class NotFoundAppError(UnprocessableEntityAppError):
    """Raised when the requested resource does not exist."""


class ConflictAppError(AppError):
    """Raised when a write would violate a uniqueness rule (e.g. email taken)."""


class PersistenceAppError(AppError):
    """Raised by document gateways when a storage operation fails.

    Services convert this into a ``Failed`` outcome; it should never reach
    the HTTP layer directly.
    """

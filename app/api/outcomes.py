"""Translate service outcomes into values or API errors."""

from __future__ import annotations

from typing import TypeVar

from app.core.errors import NotFoundAppError, UnprocessableEntityAppError
from app.services.outcome import Failed, NotFound, Ok, Outcome

T = TypeVar("T")


def unwrap(outcome: Outcome[T], *, action: str) -> T:
    """Return the value of an ``Ok`` outcome or raise the matching AppError.

    Args:
        outcome: Result returned by a service call.
        action: Verb used in error codes/messages (e.g. "update").

    Raises:
        NotFoundAppError: For ``NotFound`` (e.g. ``product_not_found``).
        UnprocessableEntityAppError: For ``Failed`` (e.g. ``product_update_failed``).
    """
    if isinstance(outcome, Ok):
        return outcome.value

    if isinstance(outcome, NotFound):
        raise NotFoundAppError(
            code=f"{outcome.resource}_not_found",
            message=f"Unknown {outcome.resource}",
            details={"resource": outcome.resource, "resource_id": outcome.resource_id},
        )

    if isinstance(outcome, Failed):
        raise UnprocessableEntityAppError(
            code=f"{outcome.resource}_{action}_failed",
            message=f"Failed to {action} {outcome.resource}",
            details={"resource": outcome.resource},
        )

    raise TypeError(f"Unsupported outcome: {outcome!r}")

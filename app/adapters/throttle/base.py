"""Login throttle interfaces.

The authentication service depends on this abstraction (not the concrete
implementation) so the in-process counter can later be swapped for a shared
store with minimal changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class LoginOutcome(str, Enum):
    """Result of a credential check, reported back to the throttle."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class ThrottleDecision:
    """Result of a throttle check.

    Attributes:
        allowed: Whether the credential check may proceed.
        fail_count: Failures currently on record for the identifier.
        retry_after_seconds: Seconds until the lockout ends when blocked.
    """

    allowed: bool
    fail_count: int
    retry_after_seconds: int | None


class AbstractLoginThrottle(ABC):
    """Interface for failed-login throttles.

    Callers run ``check`` before verifying credentials and ``record`` after.
    The two calls are not atomic together.
    """

    @abstractmethod
    def check(self, identifier: str) -> ThrottleDecision:
        """Decide whether a login attempt for ``identifier`` may proceed.

        Args:
            identifier: Login identifier (email).

        Returns:
            ThrottleDecision describing whether the attempt is allowed.
        """
        raise NotImplementedError

    @abstractmethod
    def record(self, identifier: str, outcome: LoginOutcome) -> None:
        """Register the outcome of a credential check for ``identifier``."""
        raise NotImplementedError

    @abstractmethod
    def failure_count(self, identifier: str) -> int:
        """Return the failures currently on record for ``identifier``."""
        raise NotImplementedError

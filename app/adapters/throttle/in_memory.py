"""In-memory failed-login throttle.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe per call: uses a lock around shared state, but a check and the
  following record are separate calls, so concurrent attempts for the same
  identifier can lose updates.
- Entries of identifiers that never retry are never evicted.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.throttle.base import AbstractLoginThrottle, LoginOutcome, ThrottleDecision


@dataclass
class _FailureState:
    fail_count: int
    last_failure_time: float


class InMemoryLoginThrottle(AbstractLoginThrottle):
    """Lock out an identifier after repeated failed logins.

    Once ``max_failures`` failures are on record, attempts are refused until
    ``lockout_seconds`` have passed since the last recorded failure. The next
    attempt after that window starts from a clean slate. A successful login
    clears the record at any time.
    """

    def __init__(
        self,
        *,
        max_failures: int = 5,
        lockout_seconds: int = 30 * 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the throttle.

        Args:
            max_failures: Failures after which attempts are refused.
            lockout_seconds: Window measured from the last failure.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If max_failures or lockout_seconds are invalid.
        """
        if max_failures < 1:
            raise ValueError("max_failures must be >= 1")
        if lockout_seconds < 1:
            raise ValueError("lockout_seconds must be >= 1")

        self._max_failures = max_failures
        self._lockout_seconds = lockout_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_identifier: dict[str, _FailureState] = {}

    @property
    def max_failures(self) -> int:
        return self._max_failures

    @property
    def lockout_seconds(self) -> int:
        return self._lockout_seconds

    def check(self, identifier: str) -> ThrottleDecision:
        """Decide whether a login attempt may proceed.

        A stale record (window elapsed) is dropped here, so the next failure
        starts counting from one again.
        """
        now = self._clock()

        with self._lock:
            state = self._state_by_identifier.get(identifier)
            if state is None:
                return ThrottleDecision(allowed=True, fail_count=0, retry_after_seconds=None)

            elapsed = now - state.last_failure_time
            if elapsed < self._lockout_seconds and state.fail_count >= self._max_failures:
                retry_after = max(0, int(math.ceil(self._lockout_seconds - elapsed)))
                return ThrottleDecision(
                    allowed=False,
                    fail_count=state.fail_count,
                    retry_after_seconds=retry_after,
                )

            if elapsed >= self._lockout_seconds:
                del self._state_by_identifier[identifier]
                return ThrottleDecision(allowed=True, fail_count=0, retry_after_seconds=None)

            return ThrottleDecision(
                allowed=True,
                fail_count=state.fail_count,
                retry_after_seconds=None,
            )

    def record(self, identifier: str, outcome: LoginOutcome) -> None:
        """Count a failure or clear the record after a success."""
        with self._lock:
            if outcome is LoginOutcome.SUCCESS:
                self._state_by_identifier.pop(identifier, None)
                return

            now = self._clock()
            state = self._state_by_identifier.get(identifier)
            if state is None:
                self._state_by_identifier[identifier] = _FailureState(
                    fail_count=1,
                    last_failure_time=now,
                )
            else:
                state.fail_count += 1
                state.last_failure_time = now

    def failure_count(self, identifier: str) -> int:
        """Return the failures on record for ``identifier`` (0 when none)."""
        with self._lock:
            state = self._state_by_identifier.get(identifier)
            return state.fail_count if state else 0

    def clear(self) -> None:
        """Forget every recorded failure."""
        with self._lock:
            self._state_by_identifier.clear()

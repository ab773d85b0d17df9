"""Login throttle wiring for the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a dependency function only.
- Swap-friendly: the counter store sits behind an abstract interface.
- Process-wide state: one throttle instance survives across requests.
"""

from __future__ import annotations

from app.adapters.throttle.base import AbstractLoginThrottle
from app.adapters.throttle.in_memory import InMemoryLoginThrottle
from app.core.config import settings

_throttle: AbstractLoginThrottle | None = None
_throttle_config: tuple[int, int] | None = None


def get_login_throttle() -> AbstractLoginThrottle:
    """Return the process-wide login throttle.

    The instance is cached in-module to preserve failure counters across
    requests. If configuration changes (primarily in tests), the throttle is
    rebuilt with empty state.

    Returns:
        AbstractLoginThrottle: Configured throttle instance.
    """

    global _throttle, _throttle_config

    config = (
        settings.app.login_max_failed_attempts,
        settings.app.login_lockout_minutes,
    )

    if _throttle is None or _throttle_config != config:
        _throttle = InMemoryLoginThrottle(
            max_failures=settings.app.login_max_failed_attempts,
            lockout_seconds=settings.app.login_lockout_minutes * 60,
        )
        _throttle_config = config

    return _throttle

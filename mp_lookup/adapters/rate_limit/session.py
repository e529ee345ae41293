"""Per-session lookup throttle used on the client side.

A session lives as long as the object does; nothing is persisted, so a new
session starts with a clean slate. Two independent gates apply:

- a minimum cooldown between recorded lookups, and
- a lifetime cap on the number of lookups (no window, never resets).
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class SessionCheck:
    """Result of a session throttle check.

    Attributes:
        allowed: Whether a new lookup may start.
        message: User-facing explanation when blocked, empty otherwise.
        wait_seconds: Seconds until the cooldown elapses, or None when the
            block is permanent for this session (or there is no block).
    """

    allowed: bool
    message: str = ""
    wait_seconds: int | None = None


class SessionRateLimiter:
    """Cooldown plus lifetime cap for one client session.

    ``check`` never mutates state; call ``record`` once a lookup is actually
    issued. Single-threaded by construction, so no locking.
    """

    def __init__(
        self,
        *,
        cooldown_seconds: float = 3.0,
        max_lookups: int = 20,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if cooldown_seconds < 0:
            raise ValueError("cooldown_seconds must be >= 0")
        if max_lookups < 1:
            raise ValueError("max_lookups must be >= 1")

        self._cooldown = cooldown_seconds
        self._max_lookups = max_lookups
        self._clock = clock
        self._last_request_at: float | None = None
        self._request_count = 0

    @property
    def request_count(self) -> int:
        return self._request_count

    @property
    def remaining(self) -> int:
        return max(0, self._max_lookups - self._request_count)

    def check(self) -> SessionCheck:
        if self._request_count >= self._max_lookups:
            return SessionCheck(
                allowed=False,
                message=(
                    "You have reached the maximum number of lookups. "
                    "Start a new session if you need to continue."
                ),
            )

        if self._last_request_at is not None:
            elapsed = self._clock() - self._last_request_at
            if elapsed < self._cooldown:
                wait = math.ceil(self._cooldown - elapsed)
                plural = "s" if wait > 1 else ""
                return SessionCheck(
                    allowed=False,
                    message=f"Please wait {wait} second{plural} before trying again.",
                    wait_seconds=wait,
                )

        return SessionCheck(allowed=True)

    def record(self) -> None:
        self._last_request_at = self._clock()
        self._request_count += 1

"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: N instances behind a router allow ``limit * N`` lookups.
- Windows start at each key's first request, not on wall-clock boundaries.
- Stale entries are only swept once the table grows past a threshold, so a
  burst of distinct keys below that threshold is never cleaned.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from mp_lookup.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

logger = logging.getLogger(__name__)


@dataclass
class _WindowState:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window counter keyed by client identity.

    Every call counts, including blocked ones; the window is not extended by
    rejected traffic and resets to a fresh count once it has elapsed.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: int,
        cleanup_threshold: int = 1000,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed requests per window.
            window_seconds: Size of the fixed window in seconds.
            cleanup_threshold: Table size above which stale windows are swept.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If any argument is out of range.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds < 1:
            raise ValueError("window_seconds must be >= 1")
        if cleanup_threshold < 1:
            raise ValueError("cleanup_threshold must be >= 1")

        self._limit = limit
        self._window_seconds = window_seconds
        self._cleanup_threshold = cleanup_threshold
        self._clock = clock
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> int:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._state_by_key)

    def _is_expired(self, state: _WindowState, now: float) -> bool:
        return now - state.window_start >= self._window_seconds

    def _sweep_expired_locked(self, now: float) -> None:
        """Drop every window older than one window duration."""
        expired = [k for k, s in self._state_by_key.items() if self._is_expired(s, now)]
        for key in expired:
            del self._state_by_key[key]
        logger.debug(
            "rate_limit.sweep",
            extra={"evicted": len(expired), "size": len(self._state_by_key)},
        )

    def consume(self, key: str) -> RateLimitResult:
        """Record a request for ``key`` and decide whether it may proceed.

        Args:
            key: Unique identifier for rate limiting (e.g., client address).

        Returns:
            RateLimitResult with the decision and window metadata.

        Raises:
            ValueError: If key is empty.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        now = self._clock()

        with self._lock:
            if len(self._state_by_key) > self._cleanup_threshold:
                self._sweep_expired_locked(now)

            state = self._state_by_key.get(key)
            if state is None or self._is_expired(state, now):
                state = _WindowState(window_start=now, count=0)
                self._state_by_key[key] = state

            state.count += 1
            allowed = state.count <= self._limit
            remaining = max(0, self._limit - state.count)
            reset_in = max(0, math.ceil(state.window_start + self._window_seconds - now))

        return RateLimitResult(
            allowed=allowed,
            limit=self._limit,
            remaining=remaining,
            reset_in_seconds=reset_in,
            retry_after_seconds=None if allowed else reset_in,
        )

"""Rate limiter interfaces.

The API depends on this abstraction rather than the in-memory table, so a
shared counter store can replace it when a global (multi-instance) limit
is required.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of recording one request against a key.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when exhausted).
        reset_in_seconds: Whole seconds until the current window ends.
        retry_after_seconds: Wait time in seconds when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_in_seconds: int
    retry_after_seconds: int | None = None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(self, key: str) -> RateLimitResult:
        """Record one request for ``key`` and report whether it is allowed.

        Args:
            key: Client identity (e.g., network address).

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

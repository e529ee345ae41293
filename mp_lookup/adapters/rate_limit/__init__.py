"""Rate limiting adapters.

A small abstraction layer so lookups can be throttled by an in-memory
limiter today and by a shared store (e.g., Redis) later without changing
the API layer.
"""

from mp_lookup.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from mp_lookup.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from mp_lookup.adapters.rate_limit.session import SessionCheck, SessionRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
    "SessionCheck",
    "SessionRateLimiter",
]

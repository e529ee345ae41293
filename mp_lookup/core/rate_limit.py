"""Rate limiting dependency for FastAPI routes.

Wires the rate limiting adapter into the HTTP layer:

- Fixed-window limit per client network address.
- The decision is stored on ``request.state.rate_limit`` so both successful
  responses and error handlers can expose the ``X-RateLimit-*`` headers.

Client addresses come from ``X-Forwarded-For`` first. That header is
spoofable: the limiter is best-effort abuse mitigation for the upstream
API, and this key derivation must not be reused for access control.
"""

from __future__ import annotations

import hashlib
import logging
import threading

from fastapi import Request

from mp_lookup.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from mp_lookup.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from mp_lookup.core.config import settings
from mp_lookup.core.errors import RateLimitedAppError

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"

_limiter: AbstractRateLimiter | None = None
_limiter_config: tuple[int, int, int] | None = None
_limiter_lock = threading.Lock()


def get_rate_limiter() -> AbstractRateLimiter:
    """Return the process-wide rate limiter instance.

    The instance is cached in-module to preserve state across requests.
    If configuration changes (primarily in tests), the limiter is rebuilt.
    """

    global _limiter, _limiter_config

    config = (
        settings.app.rate_limit_requests,
        settings.app.rate_limit_window_seconds,
        settings.app.rate_limit_cleanup_threshold,
    )

    # Sync dependencies run on the threadpool; build the instance only once
    with _limiter_lock:
        if _limiter is None or _limiter_config != config:
            _limiter = InMemoryFixedWindowRateLimiter(
                limit=config[0],
                window_seconds=config[1],
                cleanup_threshold=config[2],
            )
            _limiter_config = config
        return _limiter


def reset_rate_limiter() -> None:
    """Drop all rate limit state (process restart semantics)."""

    global _limiter, _limiter_config
    with _limiter_lock:
        _limiter = None
        _limiter_config = None


def get_client_ip(request: Request) -> str:
    """Best-effort client address for rate limiting.

    Prefers the first ``X-Forwarded-For`` entry, then ``X-Real-IP``, then the
    socket peer, then ``"unknown"``. Intermediate proxies are not validated.
    """

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def rate_limit_headers(result: RateLimitResult | None) -> dict[str, str]:
    """Build ``X-RateLimit-*`` headers (plus Retry-After when blocked)."""

    if result is None or not settings.app.rate_limit_include_headers:
        return {}

    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_in_seconds),
    }
    if not result.allowed:
        headers["Retry-After"] = str(result.retry_after_seconds or result.reset_in_seconds)
    return headers


def enforce_rate_limit(request: Request) -> RateLimitResult | None:
    """FastAPI dependency enforcing the per-address lookup limit.

    Records one request for the caller. Runs on the threadpool, which is why
    the in-memory limiter guards its table with a lock.

    Returns:
        The limiter decision, or None when rate limiting is disabled.

    Raises:
        RateLimitedAppError: When the caller exceeded the window budget.
    """

    if not settings.app.rate_limit_enabled:
        return None

    client_ip = get_client_ip(request)
    key = f"ip:{client_ip}"
    result = get_rate_limiter().consume(key)
    request.state.rate_limit = result

    log_extra = {
        "key_hash": _hash_limiter_key(key),
        "limit": result.limit,
        "remaining": result.remaining,
        "window_s": settings.app.rate_limit_window_seconds,
    }

    if result.allowed:
        logger.debug("rate_limit.allowed", extra=log_extra)
        return result

    retry_after = result.retry_after_seconds or result.reset_in_seconds
    logger.warning("rate_limit.exceeded", extra={**log_extra, "retry_after_s": retry_after})

    raise RateLimitedAppError(
        code="rate_limited",
        message=f"Too many requests. Please try again in {retry_after} seconds.",
        details={"retry_after": retry_after, "limit": result.limit},
    )

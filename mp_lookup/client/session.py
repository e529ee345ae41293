"""Client-side lookup session against the MP lookup API.

A ``LookupSession`` mirrors one page load in a browser: it throttles its own
lookups (cooldown plus lifetime cap), validates input before touching the
network, and converts API error responses back into the application error
taxonomy. State is in-memory only and ends with the object.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from mp_lookup.adapters.rate_limit.session import SessionRateLimiter
from mp_lookup.core.config import settings
from mp_lookup.core.errors import (
    AppError,
    InvalidInputAppError,
    NotFoundAppError,
    RateLimitedAppError,
    UpstreamUnavailableAppError,
)
from mp_lookup.schemas.representative import RepresentativeContact
from mp_lookup.services.lookup_service import LookupService

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body: Any = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return f"Failed to fetch MP data (status {response.status_code})"


def _retry_after(response: httpx.Response) -> int | None:
    for header in ("Retry-After", "X-RateLimit-Reset"):
        value = response.headers.get(header)
        if value and value.isdigit():
            return int(value)
    return None


def error_from_response(response: httpx.Response) -> AppError:
    """Map a non-2xx API response to an AppError."""
    message = _error_message(response)
    status = response.status_code

    if status == 400:
        return InvalidInputAppError(code="invalid_postal_code", message=message)
    if status == 404:
        return NotFoundAppError(code="representative_not_found", message=message)
    if status == 429:
        retry_after = _retry_after(response)
        return RateLimitedAppError(
            code="rate_limited",
            message=message,
            details={"retry_after": retry_after} if retry_after is not None else None,
        )
    return UpstreamUnavailableAppError(
        code="lookup_failed",
        message=message,
        details={"http_status": status},
    )


class LookupSession:
    """One user's lookup session.

    Args:
        http_client: Client whose ``base_url`` points at the MP lookup API.
        limiter: Session throttle; built from settings when omitted.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        limiter: SessionRateLimiter | None = None,
    ) -> None:
        self.http_client = http_client
        self.limiter = limiter or SessionRateLimiter(
            cooldown_seconds=settings.app.session_cooldown_seconds,
            max_lookups=settings.app.session_max_lookups,
        )

    async def find_representative(self, postal_code: str) -> RepresentativeContact:
        """Look up the MP for a postal code through the API.

        The throttle is checked first; a malformed code is rejected without
        being counted against the session.

        Raises:
            RateLimitedAppError: Session cooldown or cap reached, or the server
                limiter rejected the call.
            InvalidInputAppError: Malformed postal code.
            NotFoundAppError: No MP found for the code.
            UpstreamUnavailableAppError: The API could not be reached.
        """
        check = self.limiter.check()
        if not check.allowed:
            raise RateLimitedAppError(
                code="session_rate_limited",
                message=check.message,
                details={"retry_after": check.wait_seconds} if check.wait_seconds else None,
            )

        normalized = LookupService.validate_postal_code(postal_code)
        self.limiter.record()

        try:
            response = await self.http_client.get(
                "/api/representative",
                params={"code": normalized},
            )
        except httpx.HTTPError as exc:
            logger.warning("session.request_failed", extra={"error_type": type(exc).__name__})
            raise UpstreamUnavailableAppError(
                code="lookup_unreachable",
                message="Failed to look up your MP. Please try again later.",
                details={"http_status": 503},
            ) from exc

        if not response.is_success:
            raise error_from_response(response)

        return RepresentativeContact.model_validate(response.json())

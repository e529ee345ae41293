"""OpenNorth Represent API adapter."""

import logging
from typing import Any

import httpx

from mp_lookup.adapters.directory.base import AbstractDirectoryClient
from mp_lookup.core.errors import (
    InvalidInputAppError,
    NotFoundAppError,
    UpstreamUnavailableAppError,
)

logger = logging.getLogger(__name__)


class RepresentClient(AbstractDirectoryClient):
    """Client for ``GET {base}/postcodes/{code}/`` on the Represent API.

    Performs exactly one request per lookup; retries are left to the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        user_agent: str = "mp-lookup/0.1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Represent client.

        Args:
            base_url: API root, e.g. "https://represent.opennorth.ca".
            timeout_seconds: Timeout for each request in seconds.
            user_agent: User-Agent header sent upstream.
            transport: Optional httpx transport override.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.headers = {"Accept": "application/json", "User-Agent": user_agent}
        self._transport = transport

    async def lookup_postcode(self, postal_code: str) -> dict[str, Any]:
        """Fetch representatives for a normalized postal code.

        Args:
            postal_code: Normalized code, e.g. "K1A0A6".

        Returns:
            dict[str, Any]: Decoded JSON payload.

        Raises:
            NotFoundAppError: 404 from upstream.
            InvalidInputAppError: 400 from upstream.
            UpstreamUnavailableAppError: Transport error, other non-2xx status,
                or a body that is not a JSON object.
        """
        url = f"{self.base_url}/postcodes/{postal_code}/"

        try:
            async with httpx.AsyncClient(
                headers=self.headers,
                timeout=self.timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
        except httpx.HTTPError as exc:
            logger.error(
                "directory.unreachable",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            raise UpstreamUnavailableAppError(
                code="directory_unreachable",
                message="Unable to connect to the MP lookup service. Please try again later.",
                details={"http_status": 503},
            ) from exc

        if response.status_code == 404:
            raise NotFoundAppError(
                code="postal_code_not_found",
                message="No results found for this postal code. Please verify the postal code is correct.",
            )
        if response.status_code == 400:
            raise InvalidInputAppError(
                code="invalid_postal_code",
                message="Invalid postal code format.",
            )
        if not response.is_success:
            logger.error(
                "directory.lookup_failed",
                extra={
                    "upstream_status": response.status_code,
                    "reason": response.reason_phrase,
                },
            )
            raise UpstreamUnavailableAppError(
                code="directory_error",
                message="Unable to reach the MP lookup service. Please try again later.",
                details={"http_status": 502, "upstream_status": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailableAppError(
                code="directory_invalid_response",
                message="The MP lookup service returned an unreadable response. Please try again later.",
                details={"http_status": 502},
            ) from exc

        if not isinstance(payload, dict):
            raise UpstreamUnavailableAppError(
                code="directory_invalid_response",
                message="The MP lookup service returned an unreadable response. Please try again later.",
                details={"http_status": 502},
            )
        return payload

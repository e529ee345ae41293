"""Postal code lookup service.

Validates user input before any network call, queries the directory, and
selects the target representative. Errors are raised from the
``mp_lookup.core.errors`` taxonomy so callers never see a silent empty
result:

- InvalidInputAppError: malformed postal code (no network call made)
- NotFoundAppError: valid code, but no representative holds the office
- UpstreamUnavailableAppError: directory failure (propagated from adapter)
  or a payload that does not parse as representative records
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from mp_lookup.adapters.directory.base import AbstractDirectoryClient
from mp_lookup.core.errors import InvalidInputAppError, NotFoundAppError, UpstreamUnavailableAppError
from mp_lookup.schemas.representative import RepresentativeContact
from mp_lookup.services.email_composer import derive_email_from_name
from mp_lookup.services.selector import FEDERAL_MP, OfficeMatcher, select_target
from mp_lookup.utils.postal_code import normalize_postal_code

logger = logging.getLogger(__name__)


class LookupService:
    """Find the representative for a postal code."""

    def __init__(
        self,
        directory: AbstractDirectoryClient,
        *,
        office: OfficeMatcher = FEDERAL_MP,
        email_domain: str = "parl.gc.ca",
        fallback_name: str = "Member of Parliament",
    ) -> None:
        self.directory = directory
        self.office = office
        self.email_domain = email_domain
        self.fallback_name = fallback_name

    @staticmethod
    def validate_postal_code(raw_code: str | None) -> str:
        """Normalize a postal code or raise InvalidInputAppError."""
        normalized = normalize_postal_code(raw_code)
        if normalized is None:
            raise InvalidInputAppError(
                code="invalid_postal_code",
                message=(
                    "Invalid postal code format. Please provide a valid Canadian "
                    "postal code (e.g., A1A1A1)."
                ),
            )
        return normalized

    async def lookup(self, raw_code: str | None) -> dict[str, Any]:
        """Return the raw directory payload for a postal code.

        Args:
            raw_code: User-supplied postal code, any case, spaces allowed.

        Returns:
            dict[str, Any]: Upstream JSON payload, unchanged.
        """
        postal_code = self.validate_postal_code(raw_code)
        payload = await self.directory.lookup_postcode(postal_code)
        representatives = payload.get("representatives_centroid")
        logger.info(
            "lookup.completed",
            extra={
                "fsa": postal_code[:3],
                "representative_count": len(representatives) if isinstance(representatives, list) else 0,
            },
        )
        return payload

    async def find_representative(self, raw_code: str | None) -> RepresentativeContact:
        """Select the representative for a postal code, ready to be emailed.

        Falls back to deriving an address from the name when the directory
        does not publish one. A record with an address but no name is
        addressed by ``fallback_name``.

        Raises:
            InvalidInputAppError: Malformed postal code.
            NotFoundAppError: No matching representative, or no usable email.
            UpstreamUnavailableAppError: The directory payload does not have
                the expected shape.
        """
        payload = await self.lookup(raw_code)
        try:
            record = select_target(payload, self.office)
        except ValidationError as exc:
            logger.warning("lookup.invalid_payload", extra={"error_count": exc.error_count()})
            raise UpstreamUnavailableAppError(
                code="directory_invalid_response",
                message="The MP lookup service returned an unreadable response. Please try again later.",
                details={"http_status": 502},
            ) from exc

        if record is None:
            raise NotFoundAppError(
                code="representative_not_found",
                message=(
                    "Could not find a federal MP for this postal code. The postal "
                    "code may be invalid or cover multiple ridings."
                ),
            )

        email = record.email
        derived = False
        if not email:
            email = derive_email_from_name(record.name, self.email_domain)
            derived = email is not None

        if not email:
            raise NotFoundAppError(
                code="email_undeterminable",
                message="Could not determine MP email address. Please contact your MP directly.",
            )

        return RepresentativeContact(
            name=record.name or self.fallback_name,
            riding=record.district_name or "Unknown riding",
            email=email,
            email_derived=derived,
            elected_office=record.elected_office,
            representative_set_name=record.representative_set_name,
        )

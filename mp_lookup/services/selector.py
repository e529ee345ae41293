"""Target representative selection from a postcode lookup.

The directory returns every official whose district covers the postcode:
federal, provincial, municipal, school board... This module picks the one
holding the target office.

Matching rules (compared lowercased, never altered for display):

- ``elected_office`` equals one of the short codes exactly, or
- ``elected_office`` contains one of the full title phrases, or
- ``representative_set_name`` contains one of the body phrases.

Short codes are never matched by substring: "MPP" (Ontario provincial
legislator) contains "MP", and matching it selected the wrong official.

Known limitation: when several records match, the first one in response
order wins. The upstream API does not order by relevance, so this is a
positional tie-break, not an authoritative one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from mp_lookup.schemas.representative import DirectoryResponse, RepresentativeRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfficeMatcher:
    """Vocabulary identifying one office level in free-text upstream labels.

    All entries must be lowercase. Extend the tuples when upstream starts
    using a new label rather than loosening the short-code rule.
    """

    short_codes: tuple[str, ...]
    title_phrases: tuple[str, ...] = ()
    body_phrases: tuple[str, ...] = ()

    def matches(self, record: RepresentativeRecord) -> bool:
        office = (record.elected_office or "").lower()
        body = (record.representative_set_name or "").lower()

        if office in self.short_codes:
            return True
        if any(phrase in office for phrase in self.title_phrases):
            return True
        return any(phrase in body for phrase in self.body_phrases)


FEDERAL_MP = OfficeMatcher(
    short_codes=("mp",),
    title_phrases=("member of parliament",),
    body_phrases=("house of commons", "chambre des communes"),
)


def select_target(
    response: DirectoryResponse | Mapping[str, Any] | None,
    office: OfficeMatcher = FEDERAL_MP,
) -> RepresentativeRecord | None:
    """Return the first representative holding ``office``, or None.

    Args:
        response: Parsed lookup payload (model or raw JSON mapping).
        office: Office level to select. Defaults to federal MP.

    Returns:
        The matching record, or None when the payload is missing, has no
        representatives, or none of them hold the office.

    Raises:
        pydantic.ValidationError: A raw payload whose records do not have
            the expected shape.
    """
    if response is None:
        return None
    if not isinstance(response, DirectoryResponse):
        response = DirectoryResponse.model_validate(response)

    candidates = response.representatives_centroid or []
    matches = [record for record in candidates if office.matches(record)]
    if not matches:
        return None

    if len(matches) > 1:
        logger.warning(
            "selector.ambiguous_match",
            extra={
                "match_count": len(matches),
                "districts": [m.district_name for m in matches],
            },
        )
    return matches[0]

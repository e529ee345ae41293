from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from mp_lookup.adapters.directory.factory import create_directory_client
from mp_lookup.adapters.rate_limit.base import RateLimitResult
from mp_lookup.core.config import settings
from mp_lookup.core.rate_limit import enforce_rate_limit, rate_limit_headers
from mp_lookup.schemas.representative import RepresentativeContact
from mp_lookup.services.lookup_service import LookupService

router = APIRouter(tags=["Lookup"])

_lookup_service: LookupService | None = None


def get_lookup_service() -> LookupService:
    """Return the process-wide lookup service, built on first use."""
    global _lookup_service
    if _lookup_service is None:
        _lookup_service = LookupService(
            create_directory_client(),
            email_domain=settings.app.email_domain,
        )
    return _lookup_service


def cache_control_header() -> str:
    return (
        f"s-maxage={settings.app.cache_max_age_seconds}, "
        f"stale-while-revalidate={settings.app.cache_stale_while_revalidate_seconds}"
    )


@router.get("/lookup")
async def lookup_postal_code(
    code: str | None = Query(
        None,
        description="Canadian postal code, e.g. 'K1A 0A6' or 'k1a0a6'.",
    ),
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: LookupService = Depends(get_lookup_service),
) -> JSONResponse:
    """Proxy a postal code lookup to the Represent API.

    Rate limited per client address. Returns the upstream JSON unchanged so
    callers can run their own selection.

    Args:
        code: Postal code to look up.

    Returns:
        JSONResponse: Upstream payload with rate limit and cache headers.

    Raises:
        InvalidInputAppError: 400 for a malformed code.
        NotFoundAppError: 404 when upstream has no results.
        RateLimitedAppError: 429 when the caller exceeded the limit.
        UpstreamUnavailableAppError: 502/503 when upstream fails.
    """
    payload = await service.lookup(code)

    headers = rate_limit_headers(rate_limit)
    headers["Cache-Control"] = cache_control_header()
    return JSONResponse(content=payload, headers=headers)


@router.get("/representative", response_model=RepresentativeContact)
async def find_representative(
    response: Response,
    code: str | None = Query(
        None,
        description="Canadian postal code, e.g. 'K1A 0A6' or 'k1a0a6'.",
    ),
    rate_limit: RateLimitResult | None = Depends(enforce_rate_limit),
    service: LookupService = Depends(get_lookup_service),
) -> RepresentativeContact:
    """Return the federal MP for a postal code.

    Same gating as ``/lookup``, but the selection runs server-side and only
    the chosen representative is returned. A missing email is derived from
    the name (flagged by ``email_derived``).
    """
    contact = await service.find_representative(code)

    response.headers.update(rate_limit_headers(rate_limit))
    response.headers["Cache-Control"] = cache_control_header()
    return contact

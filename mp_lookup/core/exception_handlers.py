"""Global exception handlers for consistent error responses.

Every error leaves the API as ``{"error": "<message>", "code": ..., "request_id": ...}``
with a status code derived from the error type:

- InvalidInputAppError / ValidationAppError → 400
- NotFoundAppError → 404
- RateLimitedAppError → 429 (with Retry-After)
- UpstreamUnavailableAppError → details["http_status"] (502 or 503)
- Unexpected Exception → generic 500 (safety net)

Rate limit headers recorded on ``request.state`` are attached to error
responses too, so clients always see their remaining budget.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from mp_lookup.adapters.rate_limit.base import RateLimitResult
from mp_lookup.core.errors import (
    AppError,
    NotFoundAppError,
    RateLimitedAppError,
    UpstreamUnavailableAppError,
)
from mp_lookup.core.logging import get_request_id
from mp_lookup.core.rate_limit import rate_limit_headers

logger = logging.getLogger(__name__)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, RateLimitedAppError):
        return 429
    if isinstance(exc, UpstreamUnavailableAppError):
        return (exc.details or {}).get("http_status", 502)
    return 400


def _headers_for(request: Request) -> dict[str, str]:
    result = getattr(request.state, "rate_limit", None)
    if not isinstance(result, RateLimitResult):
        return {}
    return rate_limit_headers(result)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with a consistent JSON body.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with the mapped status code and rate limit headers.
    """
    status_code = status_code_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_id": get_request_id(),
        },
    )

    content = {
        "error": exc.message,
        "code": exc.code,
        "request_id": get_request_id(),
    }
    if exc.details and exc.details.get("retry_after") is not None:
        content["retry_after"] = exc.details["retry_after"]

    return JSONResponse(
        status_code=status_code,
        content=content,
        headers=_headers_for(request) or None,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors.

    Logs the failure for debugging but returns a generic message so no
    implementation details reach the client.
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred. Please try again later.",
            "code": "internal_server_error",
            "request_id": get_request_id(),
        },
        headers=_headers_for(request) or None,
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)

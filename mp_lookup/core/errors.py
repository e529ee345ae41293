"""Application-level exception types.

This module defines the error taxonomy shared by the lookup service, the
directory adapter and the client session, so every failure surfaces as a
structured result instead of an empty one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    http_status: int
    retry_after: int
    limit: int
    postal_code: str
    upstream_status: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class InvalidInputAppError(ValidationAppError):
    """Raised for a malformed postal code. Never retried."""


class NotFoundAppError(AppError):
    """Raised when a valid postal code yields no matching representative."""


class RateLimitedAppError(AppError):
    """Raised when a caller exceeds its lookup budget.

    ``details["retry_after"]`` carries the wait time in seconds.
    """


class UpstreamUnavailableAppError(AppError):
    """Raised when the directory API fails or returns an unhandled status.

    ``details["http_status"]`` is the status reported to callers (502 or 503).
    """

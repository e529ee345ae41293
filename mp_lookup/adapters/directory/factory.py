"""Factory for the representative directory client."""

from mp_lookup.adapters.directory.base import AbstractDirectoryClient
from mp_lookup.adapters.directory.represent_client import RepresentClient
from mp_lookup.core.config import settings
from mp_lookup.core.errors import ValidationAppError


def create_directory_client() -> AbstractDirectoryClient:
    """Instantiate the directory client from ``settings.lookup``.

    Returns:
        AbstractDirectoryClient: Configured Represent API client.

    Raises:
        ValidationAppError: If the base URL is not an http(s) URL.
    """
    base_url = settings.lookup.base_url.strip()
    if not base_url.startswith(("http://", "https://")):
        raise ValidationAppError(
            code="lookup_invalid_base_url",
            message=f"LOOKUP_BASE_URL must be an http(s) URL, got '{base_url}'",
        )

    return RepresentClient(
        base_url=base_url,
        timeout_seconds=settings.lookup.timeout_seconds,
        user_agent=settings.lookup.user_agent,
    )

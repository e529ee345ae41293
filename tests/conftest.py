"""Pytest configuration and fixtures shared across all test modules.

Loaded by pytest before any test module, so the environment below is in
place before ``mp_lookup.core.config.settings`` is built.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "true")
os.environ.setdefault("LOOKUP_BASE_URL", "https://represent.test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest

from mp_lookup.core.rate_limit import reset_rate_limiter


@pytest.fixture(autouse=True)
def _fresh_rate_limiter():
    """Give every test an empty server-side limiter table."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()

"""Settings for the lookup service, grouped by env prefix.

``LOOKUP_*`` configures the upstream directory, ``APP_*`` the HTTP surface
(rate limiting, caching, session limits, email defaults) and ``LOG_*`` the
log sink. Values come from the process environment, optionally seeded from
``.env.{APP_ENV}`` at the project root.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_ENV = os.getenv("APP_ENV", "development")

PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_lookup_settings() -> "LookupSettings":
    """Build upstream directory settings from environment."""

    return LookupSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    """Build app settings from environment."""

    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    """Build logging settings from environment."""

    return LogSettings()  # type: ignore[call-arg]


class LookupSettings(BaseSettings):
    """Upstream representative directory (OpenNorth Represent) configuration."""

    base_url: str = Field(
        "https://represent.opennorth.ca",
        description="Base URL of the Represent API",
    )
    timeout_seconds: float = Field(
        10.0,
        description="Upstream request timeout in seconds",
    )
    user_agent: str = Field(
        "mp-lookup/0.1",
        description="User-Agent sent to the upstream directory",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOOKUP_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    rate_limit_enabled: bool = Field(
        True,
        description="Enable rate limiting per client address",
    )
    rate_limit_requests: int = Field(
        10,
        description="Maximum number of lookups allowed per window (per client address)",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        60,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_cleanup_threshold: int = Field(
        1000,
        description="Number of tracked keys above which stale windows are swept",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* headers on lookup responses",
    )

    cache_max_age_seconds: int = Field(
        3600,
        description="Shared-cache fresh lifetime (s-maxage) for successful lookups",
        ge=0,
    )
    cache_stale_while_revalidate_seconds: int = Field(
        86400,
        description="Window during which shared caches may serve stale lookups",
        ge=0,
    )

    session_cooldown_seconds: float = Field(
        3.0,
        description="Minimum delay between lookups from one client session",
        ge=0,
    )
    session_max_lookups: int = Field(
        20,
        description="Maximum number of lookups per client session",
        ge=1,
    )

    email_domain: str = Field(
        "parl.gc.ca",
        description="Domain used when deriving a representative email from a name",
    )
    email_subject: str = Field(
        "Human Rights for the People of Iran",
        description="Default subject of the composed email",
    )
    email_cc: str = Field(
        "pm@pm.gc.ca,anita.anand@international.gc.ca",
        description="Comma-separated CC recipients of the composed email",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(
        None,
        description="Log file path when output=file",
    )
    max_bytes: int = Field(
        10_485_760,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(5, description="Rotated log files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    lookup: LookupSettings = Field(default_factory=_build_lookup_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests and the ASGI entrypoint build the same application.
"""

from __future__ import annotations

from fastapi import FastAPI

from mp_lookup.api.routes import health_router, lookup_router
from mp_lookup.core.config import settings
from mp_lookup.core.exception_handlers import setup_exception_handlers
from mp_lookup.core.logging import configure_logging
from mp_lookup.core.middleware import request_id_middleware
from mp_lookup.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="MP Lookup API",
        description=(
            "Find the federal Member of Parliament for a Canadian postal code. "
            "Proxies the OpenNorth Represent API with per-address rate limiting "
            "and selects the House of Commons representative."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(lookup_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app

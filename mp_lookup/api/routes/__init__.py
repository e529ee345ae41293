from __future__ import annotations

from mp_lookup.api.routes.health import router as health_router
from mp_lookup.api.routes.lookup import router as lookup_router

__all__ = ["health_router", "lookup_router"]

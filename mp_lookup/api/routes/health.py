from __future__ import annotations

from fastapi import APIRouter

from mp_lookup.core.config import settings

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe for load balancers and monitoring.

    Does not touch the upstream directory.
    """

    return {"status": "ok", "environment": settings.app_env}

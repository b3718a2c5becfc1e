"""
trace_relay.api.routers.health

Liveness endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


# --- Module Notes -----------------------------------------------------------
# No readiness probe: the service holds no state, and its dependencies are
# exercised per request.

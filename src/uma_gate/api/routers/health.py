"""
uma_gate.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) reporting whether the gate is degraded.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(request: Request) -> JSONResponse:
    # A degraded gate answers every request with 500, so it is not ready for traffic.
    gate = request.app.state.gate
    if gate.degraded:
        return JSONResponse(
            {"status": "degraded", "missing": list(gate.missing_fields)},
            status_code=HTTP_503_SERVICE_UNAVAILABLE,
        )
    return JSONResponse({"status": "ready"}, status_code=HTTP_200_OK)


# --- Module Notes -----------------------------------------------------------
# These routes are registered ahead of the gate mount and are never gated.

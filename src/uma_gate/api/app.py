"""
uma_gate.api.app

FastAPI app factory for the gate service.

Responsibilities:
- Build the FastAPI application and register health routes and middleware.
- Wrap the downstream app in the `AuthorizationGate` and mount it at `/`.
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.types import ASGIApp

from uma_gate import __version__
from uma_gate.api.routers.health import router as health_router
from uma_gate.gate.middleware import AuthorizationGate
from uma_gate.gate.permissions import PathSegmentMapper
from uma_gate.observability.logging import configure_logging, get_logger
from uma_gate.observability.middleware import RequestContextMiddleware
from uma_gate.policy_client import PolicyClient
from uma_gate.proxy import UpstreamProxy
from uma_gate.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    downstream: ASGIApp | None = None,
    policy: PolicyClient | None = None,
) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.log_json,
    )

    if downstream is None:
        downstream = UpstreamProxy(
            base_url=settings.upstream_url,
            verify_tls=settings.verify_tls,
            timeout=settings.timeout_seconds,
        )

    gate = AuthorizationGate(
        downstream,
        config=settings.gate_config(),
        mapper=PathSegmentMapper(prefix_depth=settings.prefix_depth),
        policy=policy,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, degraded=gate.degraded)
        yield
        log.info("shutdown")

    app = FastAPI(
        title="UMA Authorization Gate",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.gate = gate

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    # Mounted last so the health routes match first.
    app.mount("/", gate)

    return app

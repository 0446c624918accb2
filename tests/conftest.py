"""
tests.conftest

Shared fakes for the gate tests.

Responsibilities:
- A recording downstream ASGI app.
- A fake authorization server served through `httpx.MockTransport`.
- A log-capturing structlog logger for injection into the gate.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
import structlog
from starlette.requests import Request
from starlette.responses import PlainTextResponse
from structlog.testing import LogCapture

from uma_gate.gate.models import GateConfig
from uma_gate.policy_client import PolicyClient


class RecordingApp:
    """Downstream app that remembers every request it was handed."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, scope, receive, send) -> None:
        request = Request(scope, receive)
        self.calls.append(
            {
                "type": scope["type"],
                "method": request.method,
                "path": scope["path"],
                "query": scope.get("query_string", b""),
                "headers": dict(request.headers),
                "body": await request.body(),
            }
        )
        await PlainTextResponse("downstream", status_code=200)(scope, receive, send)


class FakeAuthServer:
    def __init__(
        self,
        status_code: int = 200,
        body: str = '{"access_token": "rpt"}',
        error: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    def policy(self) -> PolicyClient:
        return PolicyClient(transport=httpx.MockTransport(self))

    def form(self, index: int = -1) -> dict[str, str]:
        parsed = parse_qs(self.requests[index].content.decode())
        return {k: v[0] for k, v in parsed.items()}


@pytest.fixture
def downstream() -> RecordingApp:
    return RecordingApp()


@pytest.fixture
def auth_server() -> FakeAuthServer:
    return FakeAuthServer()


@pytest.fixture
def config() -> GateConfig:
    return GateConfig(
        auth_server_url="https://idp.example.test/realms/demo/protocol/openid-connect/token",
        client_id="orders-api",
    )


@pytest.fixture
def log_capture() -> LogCapture:
    return LogCapture()


@pytest.fixture
def capturing_logger(log_capture: LogCapture) -> Any:
    return structlog.BoundLogger(structlog.ReturnLogger(), [log_capture], {})


@pytest.fixture
def asgi_client() -> Callable[[Any], httpx.AsyncClient]:
    def factory(app: Any) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://gate.test")

    return factory


# --- Module Notes -----------------------------------------------------------
# Fakes mutate in place (status_code, body, error) so one fixture serves every case.

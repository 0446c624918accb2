"""
uma_gate.gate.middleware

ASGI middleware that gates every HTTP request on an authorization server decision.

Responsibilities:
- Extract the caller's bearer credential and derive the requested permission.
- Ask the authorization server (UMA-ticket grant) whether it is held.
- Forward the untouched request downstream, or answer with a terminal error.
"""

from __future__ import annotations

import structlog
from starlette.requests import HTTPConnection, Request
from starlette.responses import PlainTextResponse
from starlette.status import WS_1008_POLICY_VIOLATION
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.websockets import WebSocketClose

from uma_gate.gate.errors import (
    AccessDeniedError,
    ConfigurationError,
    GateError,
    MisconfiguredError,
    MissingCredentialError,
)
from uma_gate.gate.models import GateConfig, PolicyDecision
from uma_gate.gate.permissions import PathSegmentMapper, PermissionMapper
from uma_gate.observability.logging import get_logger
from uma_gate.policy_client import PolicyClient


class AuthorizationGate:
    """
    Pipeline per request: credential -> permission -> config guard -> policy query
    -> decision. The first failing step ends the request; the downstream app only
    ever sees requests the authorization server granted.

    A gate built with blank `auth_server_url` or `client_id` starts anyway but is
    `degraded`; every request then fails with 500 until it is rebuilt.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: GateConfig | None,
        mapper: PermissionMapper | None = None,
        policy: PolicyClient | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._log = logger if logger is not None else get_logger(__name__)
        if config is None:
            self._log.error("gate.config_absent")
            raise ConfigurationError("nil config provided")

        self.app = app
        self.config = config
        self._mapper = mapper if mapper is not None else PathSegmentMapper()
        self._policy = policy if policy is not None else PolicyClient(
            verify_tls=config.verify_tls,
            timeout=config.timeout_seconds,
        )

        for field in config.missing_fields():
            self._log.warning("gate.config_missing", field=field)
        if not config.verify_tls:
            self._log.warning("gate.tls_verification_disabled")
        self._log.info(
            "gate.initialized",
            auth_server_url=config.auth_server_url,
            client_id=config.client_id,
            degraded=self.degraded,
        )

    @property
    def missing_fields(self) -> tuple[str, ...]:
        return self.config.missing_fields()

    @property
    def degraded(self) -> bool:
        return self.config.degraded

    @property
    def healthy(self) -> bool:
        return not self.degraded

    async def authorize(self, request: HTTPConnection) -> PolicyDecision:
        """
        Run the decision pipeline for `request` without touching its body.

        Websocket handshakes go through the same pipeline as plain requests.

        Raises a `GateError` subclass for the first step that fails.
        """

        authorization = request.headers.get("authorization", "")
        if not authorization.strip():
            raise MissingCredentialError()
        self._log.debug("gate.credential_present")

        permission = self._mapper(request.scope["path"])
        self._log.info("gate.permission_derived", permission=str(permission))

        # Re-checked per request rather than refused at startup.
        url = self.config.auth_server_url
        if not url.strip():
            raise MisconfiguredError()

        self._log.info("gate.policy_query", target=url)
        decision = await self._policy.evaluate(
            url=url,
            audience=self.config.client_id,
            permission=permission,
            authorization=authorization,
        )
        self._log.info(
            "gate.policy_response",
            status_code=decision.status_code,
            body_length=len(decision.body),
        )

        if not decision.granted:
            # A granted body carries the RPT; only denial bodies are worth reading.
            self._log.debug("gate.policy_denial_body", body=decision.body)
            raise AccessDeniedError()
        return decision

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        # No `receive` here: the body stays unread for the downstream app.
        request = Request(scope) if scope["type"] == "http" else HTTPConnection(scope)
        try:
            await self.authorize(request)
        except GateError as e:
            self._log.warning(
                "gate.denied",
                reason=e.reason,
                status_code=e.status_code,
                detail=e.detail,
            )
            if scope["type"] == "websocket":
                # Closing before accept makes the server refuse the handshake.
                await WebSocketClose(code=WS_1008_POLICY_VIOLATION, reason=e.detail)(
                    scope, receive, send
                )
                return
            response = PlainTextResponse(e.detail, status_code=e.status_code)
            await response(scope, receive, send)
            return

        self._log.info("gate.granted")
        await self.app(scope, receive, send)


# --- Module Notes -----------------------------------------------------------
# Neither the caller credential nor a granted RPT is logged.

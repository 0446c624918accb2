"""
uma_gate.proxy

Default downstream app: a minimal reverse proxy to the protected service.

Responsibilities:
- Relay granted requests (method, path, query, headers, body) to `base_url`.
- Relay the upstream status, headers and body back to the caller.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.status import HTTP_502_BAD_GATEWAY, WS_1003_UNSUPPORTED_DATA
from starlette.types import Receive, Scope, Send
from starlette.websockets import WebSocketClose

from uma_gate.observability.logging import get_logger

log = get_logger(__name__)

# Connection-scoped headers are not forwarded in either direction.
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
    }
)
_REQUEST_SKIP = HOP_BY_HOP | {"host", "content-length"}
# httpx hands back a decoded body, so length/encoding no longer describe it.
_RESPONSE_SKIP = HOP_BY_HOP | {"content-length", "content-encoding"}


class UpstreamProxy:
    def __init__(
        self,
        *,
        base_url: str,
        verify_tls: bool = True,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._verify_tls = verify_tls
        self._timeout = timeout
        self._transport = transport

    def _target(self, scope: Scope) -> str:
        # The still-encoded path, so `%2F` or `%3F` reach upstream exactly as sent.
        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.split(b"?", 1)[0].decode("latin-1")
        else:
            path = quote(scope["path"])
        url = self.base_url + path
        query = scope.get("query_string", b"")
        if query:
            url += "?" + query.decode("latin-1")
        return url

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            log.warning("proxy.websocket_refused", path=scope["path"])
            await WebSocketClose(code=WS_1003_UNSUPPORTED_DATA, reason="WebSockets are not proxied")(
                scope, receive, send
            )
            return

        if not self.base_url:
            response: Response = PlainTextResponse(
                "Upstream not configured", status_code=HTTP_502_BAD_GATEWAY
            )
            await response(scope, receive, send)
            return

        request = Request(scope, receive)
        body = await request.body()
        headers = [
            (k, v) for k, v in request.headers.raw if k.decode("latin-1").lower() not in _REQUEST_SKIP
        ]
        target = self._target(scope)

        try:
            async with httpx.AsyncClient(
                verify=self._verify_tls,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            ) as http:
                r = await http.request(request.method, target, headers=headers, content=body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.warning("proxy.upstream_error", target=target, error=str(e) or type(e).__name__)
            response = PlainTextResponse("Bad Gateway", status_code=HTTP_502_BAD_GATEWAY)
        else:
            response = Response(content=r.content, status_code=r.status_code)
            for k, v in r.headers.multi_items():
                if k.lower() not in _RESPONSE_SKIP:
                    response.headers.append(k, v)

        await response(scope, receive, send)


# --- Module Notes -----------------------------------------------------------
# Streaming bodies and websockets are not proxied; the protected services are
# plain request/response APIs.

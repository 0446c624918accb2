"""
uma_gate.policy_client

HTTP client boundary used by the gate to query the authorization server.

Responsibilities:
- Build the UMA-ticket permission query (form-urlencoded POST).
- Forward the caller's `Authorization` header unchanged.
- Translate transport failures into `UpstreamRequestError`.
"""

from __future__ import annotations

import httpx

from uma_gate.gate.errors import UpstreamRequestError
from uma_gate.gate.models import UMA_TICKET_GRANT, Permission, PolicyDecision


class PolicyClient:
    """
    One client transaction per evaluation; no pooling, no retries.
    """

    def __init__(
        self,
        *,
        verify_tls: bool = True,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._verify_tls = verify_tls
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            verify=self._verify_tls,
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )

    async def evaluate(
        self,
        *,
        url: str,
        audience: str,
        permission: Permission,
        authorization: str,
    ) -> PolicyDecision:
        form = {
            "permission": str(permission),
            "grant_type": UMA_TICKET_GRANT,
            "audience": audience,
        }
        headers = {
            "Authorization": authorization,
            "Content-Type": "application/x-www-form-urlencoded",
        }
        try:
            async with self._client() as http:
                r = await http.post(url, data=form, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # Timeouts land here too and are reported like any other transport failure.
            raise UpstreamRequestError(str(e) or type(e).__name__) from e

        return PolicyDecision(status_code=r.status_code, body=r.text)


# --- Module Notes -----------------------------------------------------------
# The authorization server answers 200 with an RPT when the permission is held and
# 403 otherwise; only the status code is interpreted here.

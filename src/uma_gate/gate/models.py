"""
uma_gate.gate.models

Gate domain models.

Responsibilities:
- Hold the immutable gate configuration (`GateConfig`).
- Define the permission unit checked per request and the upstream decision.
"""

from __future__ import annotations

from dataclasses import dataclass

UMA_TICKET_GRANT = "urn:ietf:params:oauth:grant-type:uma-ticket"


@dataclass(frozen=True, slots=True)
class GateConfig:
    """
    Authorization server coordinates, loaded once and shared across requests.
    """

    auth_server_url: str
    client_id: str
    verify_tls: bool = True
    timeout_seconds: float = 10.0

    def missing_fields(self) -> tuple[str, ...]:
        required = {"auth_server_url": self.auth_server_url, "client_id": self.client_id}
        return tuple(name for name, value in required.items() if not (value or "").strip())

    @property
    def degraded(self) -> bool:
        return bool(self.missing_fields())


@dataclass(frozen=True, slots=True)
class Permission:
    resource: str
    scope: str

    def __str__(self) -> str:
        return f"/{self.resource}#{self.scope}"


@dataclass(frozen=True, slots=True)
class PolicyDecision:
    # The body is kept for diagnostics only; the decision rides on the status code.
    status_code: int
    body: str = ""

    @property
    def granted(self) -> bool:
        return self.status_code == 200


# --- Module Notes -----------------------------------------------------------
# Keep these models free of HTTP types so mappers and clients can share them.

"""
uma_gate.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven settings for the gate, the upstream proxy and the server.
- Build the immutable `GateConfig` handed to the gate at construction.
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from uma_gate.gate.models import GateConfig


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="UMA_GATE_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "uma-gate"
    log_level: str = "INFO"
    log_json: bool = True

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Authorization server (policy decision point), e.g. a Keycloak token endpoint.
    # Left blank the gate still starts, degraded.
    auth_server_url: str = ""
    client_id: str = ""
    verify_tls: bool = True
    timeout_seconds: float = Field(default=10.0, gt=0)

    # Number of path segments ahead of `<resource>/<scope>`.
    prefix_depth: int = Field(default=3, ge=0)

    # Where granted requests are forwarded when no downstream app is supplied.
    upstream_url: str = ""

    def gate_config(self) -> GateConfig:
        return GateConfig(
            auth_server_url=self.auth_server_url,
            client_id=self.client_id,
            verify_tls=self.verify_tls,
            timeout_seconds=self.timeout_seconds,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# There is no runtime reconfiguration; a new `GateConfig` means a new gate instance.

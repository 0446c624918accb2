"""
uma_gate.gate.errors

Error taxonomy for the authorization gate.

Responsibilities:
- A fatal construction error (`ConfigurationError`).
- Request-scoped errors that carry the client-facing status code and detail.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class ConfigurationError(Exception):
    pass


class GateError(Exception):
    """
    Terminal failure for a single request.

    `reason` is stable and meant for logs; `detail` is what the client sees.
    """

    status_code: int = HTTP_401_UNAUTHORIZED
    reason: str = "gate_error"
    default_detail: str = "Unauthorized"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail if detail is not None else self.default_detail
        super().__init__(self.detail)


class MissingCredentialError(GateError):
    status_code = HTTP_401_UNAUTHORIZED
    reason = "missing_credential"
    default_detail = "Missing Authorization header"


class InvalidPathFormatError(GateError):
    status_code = HTTP_400_BAD_REQUEST
    reason = "invalid_path"
    default_detail = "Invalid path format. Expected format: /prefix/.../<resource>/<scope>"


class MisconfiguredError(GateError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    reason = "misconfigured"
    default_detail = "Misconfigured authorization server"


class UpstreamRequestError(GateError):
    # Transport failures share the 401 of an explicit denial; only `reason` differs.
    status_code = HTTP_401_UNAUTHORIZED
    reason = "upstream_request"
    default_detail = "Authorization server request failed"


class AccessDeniedError(GateError):
    status_code = HTTP_401_UNAUTHORIZED
    reason = "access_denied"
    default_detail = "Unauthorized"

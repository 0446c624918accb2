"""
uma_gate.gate.permissions

Request path to permission mapping.

Responsibilities:
- Define the `PermissionMapper` capability the gate depends on.
- Provide the default fixed-depth strategy (`/p1/p2/p3/<resource>/<scope>/...`).
"""

from __future__ import annotations

from typing import Protocol

from uma_gate.gate.errors import InvalidPathFormatError
from uma_gate.gate.models import Permission


class PermissionMapper(Protocol):
    def __call__(self, path: str) -> Permission: ...


class PathSegmentMapper:
    """
    Reads resource and scope from fixed positions after `prefix_depth` segments.

    With the default depth of 3, `/a/b/c/orders/read/42` maps to `/orders#read`.
    """

    def __init__(self, prefix_depth: int = 3) -> None:
        if prefix_depth < 0:
            raise ValueError("prefix_depth must be >= 0")
        self.prefix_depth = prefix_depth

    @property
    def min_segments(self) -> int:
        # Leading empty segment + prefix + resource + scope.
        return self.prefix_depth + 3

    def __call__(self, path: str) -> Permission:
        parts = path.split("/")
        if len(parts) < self.min_segments:
            raise InvalidPathFormatError()
        return Permission(
            resource=parts[self.prefix_depth + 1],
            scope=parts[self.prefix_depth + 2],
        )


# --- Module Notes -----------------------------------------------------------
# Segments are taken literally: `/a/b/c//read` yields an empty resource and is
# left for the authorization server to reject.

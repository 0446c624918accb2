"""
uma_gate.gate

Authorization gate package.

Responsibilities:
- Permission derivation from request paths.
- The ASGI middleware that asks the authorization server before forwarding.
"""

# Package marker.

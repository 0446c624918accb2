"""
uma_gate.api

API package for the gate service.

Responsibilities:
- FastAPI app factory, health routes and the process entrypoint.
"""

# Package marker.

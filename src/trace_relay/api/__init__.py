"""
trace_relay.api

HTTP layer (FastAPI).

Responsibilities:
- App factory, dependency wiring, and routers.
"""

# Package marker.

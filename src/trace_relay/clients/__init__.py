"""
trace_relay.clients

Outbound HTTP client boundary.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Clients receive a shared `httpx.AsyncClient`; they never create or close one.

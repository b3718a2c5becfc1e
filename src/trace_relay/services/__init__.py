"""
trace_relay.services

Service-layer package.

Responsibilities:
- Validate the inbound request and orchestrate the downstream call and queue publish.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services should be pure Python and easily testable with fake clients.

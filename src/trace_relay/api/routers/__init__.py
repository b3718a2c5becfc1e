"""
trace_relay.api.routers

Route modules mounted by `trace_relay.api.app.create_app`.
"""

# Package marker.

"""
trace_relay.telemetry

Distributed tracing boundary.

Responsibilities:
- Define the narrow `Telemetry` capability set consumed by the relay.
- Provide carrier getters/setters for HTTP headers and queue messages.
- Provide the OpenTelemetry-backed adapter.
"""

from trace_relay.telemetry.base import Telemetry
from trace_relay.telemetry.otel import OpenTelemetryAdapter

__all__ = ["OpenTelemetryAdapter", "Telemetry"]


# --- Module Notes -----------------------------------------------------------
# Another APM backend only needs its own adapter; call sites depend on `Telemetry`.

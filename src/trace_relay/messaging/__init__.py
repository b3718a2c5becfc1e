"""
trace_relay.messaging

Queue publishing (Azure Service Bus).

Responsibilities:
- Build size-bounded message batches tagged with trace context.
- Own the sender lifecycle for one publish operation.
"""

# Package marker.

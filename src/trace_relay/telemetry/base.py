"""
trace_relay.telemetry.base

Telemetry capability set and trace-context carriers.

Responsibilities:
- Define the `Telemetry` protocol the relay depends on (no concrete APM types leak
  into the request path).
- Provide carrier-specific getters/setters:
  - inbound HTTP headers (first value wins when a header repeats),
  - outbound HTTP headers (plain dict),
  - outbound Service Bus messages (application properties).
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any, Protocol

from azure.servicebus import ServiceBusMessage
from opentelemetry.context import Context
from opentelemetry.propagators.textmap import DefaultSetter, Getter, Setter
from starlette.datastructures import Headers


class RequestHeadersGetter(Getter[Headers]):
    def get(self, carrier: Headers, key: str) -> list[str] | None:
        values = carrier.getlist(key)
        # Only the first occurrence is honoured for repeated trace headers.
        return [values[0]] if values else None

    def keys(self, carrier: Headers) -> list[str]:
        return list(carrier.keys())


class MessagePropertiesSetter(Setter[ServiceBusMessage]):
    def set(self, carrier: ServiceBusMessage, key: str, value: str) -> None:
        if carrier.application_properties is None:
            carrier.application_properties = {}
        carrier.application_properties[key] = value


request_headers_getter = RequestHeadersGetter()
http_headers_setter: Setter[dict[str, str]] = DefaultSetter()
message_properties_setter = MessagePropertiesSetter()


class Telemetry(Protocol):
    """
    Narrow APM surface used by the relay.

    Any backend offering these capabilities can be plugged in through an adapter.
    """

    def transaction(
        self, name: str, carrier: Any, getter: Getter[Any]
    ) -> AbstractContextManager[Any]:
        """Accept the caller's trace headers and open the web transaction for one request."""
        ...

    def span(
        self, name: str, attributes: Mapping[str, Any] | None = None
    ) -> AbstractContextManager[Any]:
        """Open a child span under the active transaction."""
        ...

    def current_trace_context(self) -> dict[str, str]: ...

    def extract_headers(self, carrier: Any, getter: Getter[Any]) -> Context: ...

    def inject_headers(self, carrier: Any, setter: Setter[Any]) -> None: ...

    def set_identity(self, user_id: str) -> None: ...

    def add_attribute(self, key: str, value: Any) -> None: ...

    def report_error(self, message: str, attributes: Mapping[str, Any] | None = None) -> None: ...

    def linking_metadata(self) -> dict[str, str]:
        """Identifiers for correlating log lines with the active trace."""
        ...


# --- Module Notes -----------------------------------------------------------
# The three carriers share one trace context; only the read/write mechanics differ.

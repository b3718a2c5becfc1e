"""
trace_relay.telemetry.otel

OpenTelemetry implementation of the `Telemetry` protocol.

Responsibilities:
- Build the tracer provider (service resource + optional OTLP/HTTP exporter).
- Extract/inject W3C trace context through the configured text-map propagator.
- Record identity, custom attributes and error events on the active span.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from opentelemetry import propagate, trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.textmap import Getter, Setter, TextMapPropagator
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from trace_relay.settings import Settings

_INSTRUMENTATION_NAME = "trace_relay"


def configure_tracing(settings: Settings) -> TracerProvider:
    """
    Tracer provider for the process.

    Not registered globally: the adapter receives it explicitly, which keeps app
    instances (and tests) isolated from each other.
    """

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: settings.service_name}))
    if settings.otlp_endpoint:
        provider.add_span_processor(
            BatchSpanProcessor(
                OTLPSpanExporter(endpoint=settings.otlp_endpoint.rstrip("/") + "/v1/traces")
            )
        )
    return provider


class OpenTelemetryAdapter:
    def __init__(
        self,
        *,
        tracer_provider: trace.TracerProvider | None = None,
        propagator: TextMapPropagator | None = None,
    ) -> None:
        self._tracer = trace.get_tracer(_INSTRUMENTATION_NAME, tracer_provider=tracer_provider)
        self._propagator = propagator or propagate.get_global_textmap()

    @contextmanager
    def transaction(self, name: str, carrier: Any, getter: Getter[Any]) -> Iterator[Span]:
        parent = self.extract_headers(carrier, getter)
        with self._tracer.start_as_current_span(
            name, context=parent, kind=SpanKind.SERVER
        ) as span:
            yield span

    @contextmanager
    def span(self, name: str, attributes: Mapping[str, Any] | None = None) -> Iterator[Span]:
        with self._tracer.start_as_current_span(name, attributes=dict(attributes or {})) as span:
            yield span

    def current_trace_context(self) -> dict[str, str]:
        carrier: dict[str, str] = {}
        self._propagator.inject(carrier)
        return carrier

    def extract_headers(self, carrier: Any, getter: Getter[Any]) -> Context:
        return self._propagator.extract(carrier, getter=getter)

    def inject_headers(self, carrier: Any, setter: Setter[Any]) -> None:
        self._propagator.inject(carrier, setter=setter)

    def set_identity(self, user_id: str) -> None:
        trace.get_current_span().set_attribute("enduser.id", user_id)

    def add_attribute(self, key: str, value: Any) -> None:
        trace.get_current_span().set_attribute(key, value)

    def report_error(self, message: str, attributes: Mapping[str, Any] | None = None) -> None:
        span = trace.get_current_span()
        span.set_status(Status(StatusCode.ERROR, message))
        span.add_event("error", attributes={"error.message": message, **(attributes or {})})

    def linking_metadata(self) -> dict[str, str]:
        ctx = trace.get_current_span().get_span_context()
        if not ctx.is_valid:
            return {}
        return {
            "trace_id": format(ctx.trace_id, "032x"),
            "span_id": format(ctx.span_id, "016x"),
        }


# --- Module Notes -----------------------------------------------------------
# The default global propagator is W3C tracecontext + baggage; override through
# OTEL_PROPAGATORS without touching this adapter.

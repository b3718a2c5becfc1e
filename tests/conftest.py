"""
tests.conftest

Shared fixtures and fakes.

Responsibilities:
- In-memory span capture through the OpenTelemetry SDK.
- A fake Service Bus client/sender/batch honoring the SDK's batch contract.
- A stub downstream function app built on `httpx.MockTransport`.
"""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from azure.servicebus import ServiceBusMessage
from azure.servicebus.exceptions import MessageSizeExceededError
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from trace_relay.observability.logging import configure_logging
from trace_relay.telemetry.otel import OpenTelemetryAdapter

TRACE_ID = 0x4BF92F3577B34DA6A3CE929D0E0E4736
PARENT_SPAN_ID = 0x00F067AA0BA902B7
TRACEPARENT = f"00-{TRACE_ID:032x}-{PARENT_SPAN_ID:016x}-01"


def message_size(message: ServiceBusMessage) -> int:
    size = len(str(message).encode("utf-8"))
    for key, value in (message.application_properties or {}).items():
        size += len(str(key)) + len(str(value))
    return size


class FakeBatch:
    def __init__(self, max_size_in_bytes: int) -> None:
        self.max_size_in_bytes = max_size_in_bytes
        self.size_in_bytes = 0
        self.messages: list[ServiceBusMessage] = []

    def add_message(self, message: ServiceBusMessage) -> None:
        size = message_size(message)
        if self.size_in_bytes + size > self.max_size_in_bytes:
            raise MessageSizeExceededError(message="Message exceeds max batch size")
        self.size_in_bytes += size
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)


class FakeSender:
    def __init__(self, bus: FakeServiceBus, queue_name: str) -> None:
        self._bus = bus
        self.queue_name = queue_name
        self.closed = False

    async def __aenter__(self) -> FakeSender:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.closed = True

    async def create_message_batch(self) -> FakeBatch:
        return FakeBatch(self._bus.max_batch_size)

    async def send_messages(self, batch: FakeBatch) -> None:
        if self._bus.send_error is not None:
            raise self._bus.send_error
        self._bus.sent_batches.append(list(batch.messages))


class FakeServiceBus:
    """Stands in for `azure.servicebus.aio.ServiceBusClient`."""

    def __init__(self, *, max_batch_size: int = 256 * 1024) -> None:
        self.max_batch_size = max_batch_size
        self.send_error: Exception | None = None
        self.senders: list[FakeSender] = []
        self.sent_batches: list[list[ServiceBusMessage]] = []
        self.closed = False

    def get_queue_sender(self, queue_name: str, **kwargs: Any) -> FakeSender:
        if not queue_name:
            # Same failure the SDK raises before any network I/O.
            raise ValueError("Queue/Topic name is missing. Please specify queue_name/topic_name.")
        sender = FakeSender(self, queue_name)
        self.senders.append(sender)
        return sender

    async def close(self) -> None:
        self.closed = True


class DownstreamStub:
    """Records requests and answers with a fixed status."""

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text="downstream body")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture(scope="session", autouse=True)
def structured_logging() -> None:
    # Configure before any module logger is first used; structlog caches loggers.
    configure_logging(service_name="trace-relay", level="INFO", telemetry=OpenTelemetryAdapter())


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def tracer_provider(span_exporter: InMemorySpanExporter) -> TracerProvider:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(span_exporter))
    return provider


@pytest.fixture
def telemetry(tracer_provider: TracerProvider) -> OpenTelemetryAdapter:
    return OpenTelemetryAdapter(tracer_provider=tracer_provider)


@pytest.fixture
def service_bus() -> FakeServiceBus:
    return FakeServiceBus()


@pytest.fixture
def downstream() -> DownstreamStub:
    return DownstreamStub()


# --- Module Notes -----------------------------------------------------------
# Each test gets its own TracerProvider, so spans never leak between tests.

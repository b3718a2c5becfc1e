"""
trace_relay.messaging.publisher

Service Bus batch publisher.

Responsibilities:
- Create the process-wide Service Bus client (AMQP over WebSockets).
- Build one size-bounded batch of text messages per publish, each carrying the
  active trace context as application properties.
- Lease a queue sender per publish and always release it.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Iterable
from typing import Any

from azure.servicebus import ServiceBusMessage, TransportType
from azure.servicebus.aio import ServiceBusClient
from azure.servicebus.exceptions import MessageSizeExceededError, ServiceBusError

from trace_relay.errors import MessageTooLargeError, PublishError
from trace_relay.observability.logging import get_logger
from trace_relay.settings import Settings
from trace_relay.telemetry.base import Telemetry, message_properties_setter

log = get_logger(__name__)

# Draws the batch size from an inclusive range, like `random.randint`.
CountChooser = Callable[[int, int], int]


def create_service_bus_client(settings: Settings) -> ServiceBusClient | None:
    if not settings.service_bus_connection:
        return None
    return ServiceBusClient.from_connection_string(
        settings.service_bus_connection,
        transport_type=TransportType.AmqpOverWebsocket,
    )


def message_body(user: str, number: int) -> str:
    return f"Message from user {user} number {number}."


def build_messages(user: str, count: int, telemetry: Telemetry) -> list[ServiceBusMessage]:
    messages = []
    for i in range(1, count + 1):
        message = ServiceBusMessage(message_body(user, i))
        telemetry.inject_headers(message, message_properties_setter)
        messages.append(message)
    return messages


def fill_batch(batch: Any, messages: Iterable[ServiceBusMessage]) -> None:
    """
    Add every message to `batch` in order.

    The first message that does not fit aborts the fill with `MessageTooLargeError`;
    the batch is never split and must not be sent afterwards.
    """

    for i, message in enumerate(messages, start=1):
        try:
            batch.add_message(message)
        except MessageSizeExceededError as exc:
            raise MessageTooLargeError(i) from exc


class QueuePublisher:
    def __init__(
        self,
        *,
        client: ServiceBusClient,
        queue_name: str,
        telemetry: Telemetry,
        min_messages: int = 1,
        max_messages: int = 5,
        choose_count: CountChooser = random.randint,
    ) -> None:
        self._client = client
        self._queue_name = queue_name
        self._telemetry = telemetry
        self._min_messages = min_messages
        self._max_messages = max_messages
        self._choose_count = choose_count

    async def publish(self, user: str) -> int:
        """Publish one batch for `user` and return the number of messages sent."""

        with self._telemetry.span("queue.publish", {"messaging.destination.name": self._queue_name}):
            count = self._choose_count(self._min_messages, self._max_messages)
            sender = self._open_sender()
            try:
                async with sender:
                    batch = await sender.create_message_batch()
                    fill_batch(batch, build_messages(user, count, self._telemetry))
                    await sender.send_messages(batch)
            except ServiceBusError as exc:
                raise PublishError(f"Publishing to queue {self._queue_name!r} failed") from exc

            self._telemetry.add_attribute("messaging.batch.message_count", count)
            log.info("batch_published", queue=self._queue_name, count=count)
            return count

    def _open_sender(self) -> Any:
        try:
            return self._client.get_queue_sender(queue_name=self._queue_name)
        except (ServiceBusError, ValueError) as exc:
            # The SDK rejects a missing queue name with a plain ValueError.
            raise PublishError(f"Cannot open a sender for queue {self._queue_name!r}") from exc


# --- Module Notes -----------------------------------------------------------
# The Service Bus client is shared for the process lifetime; senders are cheap and
# opened per publish so a broken link never outlives one request.

"""
trace_relay.services.relay_service

Request handling for the relay endpoint.

Responsibilities:
- Validate the `user` parameter.
- Call the downstream function app, then publish the message batch; both are
  awaited so their outcome is known before the response is built.
- Record identity, status code and error events on the active transaction.
"""

from __future__ import annotations

from dataclasses import dataclass

from trace_relay.clients.downstream import USER_PARAM, DownstreamCaller
from trace_relay.errors import RelayError
from trace_relay.messaging.publisher import QueuePublisher
from trace_relay.observability.logging import get_logger
from trace_relay.telemetry.base import Telemetry

log = get_logger(__name__)

HTTP_BAD_REQUEST = 400
HTTP_BAD_GATEWAY = 502

NO_USER_ERROR = "No user supplied."
PUBLISH_ERROR = "Queue publish failed."


@dataclass(frozen=True, slots=True)
class RelayOutcome:
    status_code: int
    body: str
    # Messages published for this request; None when publishing failed or was skipped.
    published: int | None = None


class RelayService:
    def __init__(
        self,
        *,
        telemetry: Telemetry,
        caller: DownstreamCaller,
        publisher: QueuePublisher | None,
        fail_on_publish_error: bool = False,
    ) -> None:
        self._telemetry = telemetry
        self._caller = caller
        self._publisher = publisher
        self._fail_on_publish_error = fail_on_publish_error

    async def handle(self, *, user: str | None, url: str) -> RelayOutcome:
        if user:
            outcome = await self._relay(user)
        else:
            log.error("no_user_supplied")
            self._telemetry.report_error(NO_USER_ERROR, {})
            outcome = RelayOutcome(
                status_code=HTTP_BAD_REQUEST,
                body=(
                    f"Please supply a user name via the {USER_PARAM} parameter. "
                    f"For example: {url}?{USER_PARAM}=fred"
                ),
            )

        self._telemetry.add_attribute("http.statusCode", outcome.status_code)
        return outcome

    async def _relay(self, user: str) -> RelayOutcome:
        log.info("user_supplied", user=user)
        self._telemetry.set_identity(user)

        status_code = await self._caller.call(user)

        published = None
        if self._publisher is None:
            log.warning("queue_not_configured")
        else:
            published = await self._publish(self._publisher, user)
            if published is None and self._fail_on_publish_error:
                return RelayOutcome(
                    status_code=HTTP_BAD_GATEWAY,
                    body=f"Failed to publish messages for user: {user}",
                )

        return RelayOutcome(
            status_code=status_code,
            body=f"Supplied with user: {user}",
            published=published,
        )

    async def _publish(self, publisher: QueuePublisher, user: str) -> int | None:
        try:
            return await publisher.publish(user)
        except RelayError as exc:
            # Not retried; surfaced in logs and on the transaction instead.
            log.exception("queue_publish_failed", error_type=type(exc).__name__)
            self._telemetry.report_error(PUBLISH_ERROR, {"error.type": type(exc).__name__})
            return None


# --- Module Notes -----------------------------------------------------------
# Downstream transport errors propagate: the request fails with a 500 and the
# transaction span records the exception.

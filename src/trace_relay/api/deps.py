"""
trace_relay.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the settings and shared clients stashed on app.state at startup.
- Assemble the per-request `RelayService` over those shared clients.
"""

from __future__ import annotations

import httpx
from azure.servicebus.aio import ServiceBusClient
from fastapi import Depends, Request

from trace_relay.clients.downstream import DownstreamCaller
from trace_relay.messaging.publisher import QueuePublisher
from trace_relay.services.relay_service import RelayService
from trace_relay.settings import Settings
from trace_relay.telemetry.base import Telemetry


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


def telemetry_dep(request: Request) -> Telemetry:
    return request.app.state.telemetry  # type: ignore[attr-defined]


def http_client(request: Request) -> httpx.AsyncClient:
    # Created once in the app lifespan (see `trace_relay.api.app.create_app`).
    return request.app.state.http  # type: ignore[attr-defined]


def service_bus_client(request: Request) -> ServiceBusClient | None:
    return request.app.state.service_bus  # type: ignore[attr-defined]


def relay_service(
    settings: Settings = Depends(settings_dep),
    telemetry: Telemetry = Depends(telemetry_dep),
    http: httpx.AsyncClient = Depends(http_client),
    service_bus: ServiceBusClient | None = Depends(service_bus_client),
) -> RelayService:
    publisher = None
    if service_bus is not None:
        publisher = QueuePublisher(
            client=service_bus,
            queue_name=settings.service_bus_queue,
            telemetry=telemetry,
            min_messages=settings.min_messages,
            max_messages=settings.max_messages,
        )
    return RelayService(
        telemetry=telemetry,
        caller=DownstreamCaller(url=settings.url_to_call, http=http, telemetry=telemetry),
        publisher=publisher,
        fail_on_publish_error=settings.fail_on_publish_error,
    )


# --- Module Notes -----------------------------------------------------------
# Only the clients are shared across requests; the service objects are rebuilt per request.

"""
trace_relay.api.app

FastAPI app factory for the trace relay service.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Initialize and dispose shared infrastructure (HTTP client, Service Bus client,
  tracer provider).
- Provide a single composition root where cross-cutting concerns live.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

import httpx
from azure.servicebus.aio import ServiceBusClient
from fastapi import FastAPI

from trace_relay import __version__
from trace_relay.api.routers.health import router as health_router
from trace_relay.api.routers.relay import router as relay_router
from trace_relay.messaging.publisher import create_service_bus_client
from trace_relay.observability.logging import configure_logging, get_logger
from trace_relay.observability.middleware import RequestContextMiddleware
from trace_relay.settings import Settings
from trace_relay.telemetry.base import Telemetry
from trace_relay.telemetry.otel import OpenTelemetryAdapter, configure_tracing

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    telemetry: Telemetry | None = None,
    http: httpx.AsyncClient | None = None,
    service_bus: ServiceBusClient | None = None,
) -> FastAPI:
    """
    Clients passed in are used as-is and left open on shutdown; clients built here
    are owned (and closed) by the app.
    """

    tracer_provider = None
    if telemetry is None:
        tracer_provider = configure_tracing(settings)
        telemetry = OpenTelemetryAdapter(tracer_provider=tracer_provider)

    configure_logging(
        service_name=settings.service_name, level=settings.log_level, telemetry=telemetry
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        async with AsyncExitStack() as stack:
            if http is None:
                app.state.http = await stack.enter_async_context(httpx.AsyncClient())
            else:
                app.state.http = http

            app.state.service_bus = service_bus
            if service_bus is None:
                owned = create_service_bus_client(settings)
                if owned is None:
                    log.warning("service_bus_not_configured")
                else:
                    app.state.service_bus = await stack.enter_async_context(owned)

            yield

        if tracer_provider is not None:
            # Flush pending spans before the worker is frozen or recycled.
            tracer_provider.shutdown()
        log.info("shutdown")

    app = FastAPI(
        title="Trace Relay",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.telemetry = telemetry

    app.add_middleware(RequestContextMiddleware, telemetry=telemetry)
    app.include_router(health_router, tags=["health"])
    app.include_router(relay_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; request handling stays in routers/services.

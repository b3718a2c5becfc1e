"""
trace_relay.observability.middleware

HTTP middleware for request-scoped tracing and logging context.

Responsibilities:
- Generate/propagate request IDs.
- Accept the caller's distributed trace headers and open the web transaction,
  named after the request path.
- Bind request metadata into structlog contextvars (trace ids are added per
  event by `observability.logging.add_trace_context`).
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from trace_relay.observability.logging import get_logger
from trace_relay.telemetry.base import Telemetry, request_headers_getter

log = get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    - Ensures every request has a request id
    - Runs every request inside a server span continuing the caller's trace
    - Binds request-scoped contextvars for structured logs
    """

    def __init__(self, app: ASGIApp, *, telemetry: Telemetry) -> None:
        super().__init__(app)
        self._telemetry = telemetry

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        try:
            with self._telemetry.transaction(
                request.url.path, request.headers, request_headers_getter
            ):
                structlog.contextvars.bind_contextvars(
                    request_id=request_id,
                    path=request.url.path,
                    method=request.method,
                )
                log.info("request_started")
                response = await call_next(request)
                log.info("request_completed", status_code=response.status_code)
        finally:
            # Avoid leaking context across requests under async concurrency.
            structlog.contextvars.clear_contextvars()

        response.headers["x-request-id"] = request_id
        return response


# --- Module Notes -----------------------------------------------------------
# Runs outside the routers, so every route (health probes included) is traced.

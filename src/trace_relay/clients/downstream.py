"""
trace_relay.clients.downstream

HTTP client boundary for the downstream function app.

Responsibilities:
- Forward the caller's `user` to `URL_TO_CALL` as a query parameter.
- Carry the active trace context in the outgoing request headers.
- Report only the downstream status code.
"""

from __future__ import annotations

import httpx

from trace_relay.observability.logging import get_logger
from trace_relay.telemetry.base import Telemetry, http_headers_setter

log = get_logger(__name__)

USER_PARAM = "user"


def redacted_url(url: str) -> str:
    # Function URLs carry their access key in the query (`?code=...`).
    return str(httpx.URL(url).copy_with(query=None))


class DownstreamCaller:
    """
    Thin wrapper over the process-wide `httpx.AsyncClient`.

    Transport errors are not handled here; they fail the whole request.
    """

    def __init__(self, *, url: str, http: httpx.AsyncClient, telemetry: Telemetry) -> None:
        self._url = url
        self._http = http
        self._telemetry = telemetry

    async def call(self, user: str) -> int:
        with self._telemetry.span("downstream.call", {"http.url": redacted_url(self._url)}):
            headers: dict[str, str] = {}
            self._telemetry.inject_headers(headers, http_headers_setter)

            r = await self._http.get(self._url, params={USER_PARAM: user}, headers=headers)
            # Body is discarded; callers only see the status.
            log.info("downstream_response", status_code=r.status_code)
            self._telemetry.add_attribute("http.status_code", r.status_code)
            return r.status_code


# --- Module Notes -----------------------------------------------------------
# Only the query-less URL reaches span attributes; the full URL stays in-process.

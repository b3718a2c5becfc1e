"""
trace_relay.api.routers.relay

The relay function endpoint.

Responsibilities:
- Accept GET/POST on `/api/relay` anonymously.
- Hand the first `user` query value to the service layer.
- Write the plain-text response.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from trace_relay.api.deps import relay_service
from trace_relay.clients.downstream import USER_PARAM
from trace_relay.services.relay_service import RelayService

router = APIRouter(prefix="/api", tags=["relay"])


@router.api_route("/relay", methods=["GET", "POST"], response_class=PlainTextResponse)
async def relay(
    request: Request,
    service: RelayService = Depends(relay_service),
) -> PlainTextResponse:
    values = request.query_params.getlist(USER_PARAM)
    outcome = await service.handle(user=values[0] if values else None, url=str(request.url))
    # PlainTextResponse renders as `text/plain; charset=utf-8`.
    return PlainTextResponse(outcome.body, status_code=outcome.status_code)


# --- Module Notes -----------------------------------------------------------
# `request.url` feeds the guidance text, so the public host must survive any
# fronting proxy (see `trace_relay.api.__main__`).

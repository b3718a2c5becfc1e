"""
trace_relay.api.__main__

Entrypoint for running the relay via `python -m trace_relay.api`.

Responsibilities:
- Load settings and create the app.
- Serve it with uvicorn behind the function host's front end.
"""

from __future__ import annotations

import uvicorn

from trace_relay.api.app import create_app
from trace_relay.settings import get_settings


def main() -> None:
    settings = get_settings()

    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        # Trust X-Forwarded-* so request URLs show the public scheme and host.
        proxy_headers=True,
        forwarded_allow_ips="*",
        # Access lines would duplicate `request_completed`; app logs go through structlog.
        access_log=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()


# --- Module Notes -----------------------------------------------------------
# Worker count and timeouts belong to the hosting platform, not to this entrypoint.

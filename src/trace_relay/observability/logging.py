"""
trace_relay.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs.
- Stamp every log event with the trace/span ids of the span active when it is
  emitted, so lines written inside child spans join with those spans.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from trace_relay.telemetry.base import Telemetry

EventDict = dict[str, Any]


def configure_logging(*, service_name: str, level: str, telemetry: Telemetry) -> None:
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            add_service_name(service_name),
            add_trace_context(telemetry),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def add_trace_context(telemetry: Telemetry):
    """
    Processor adding `trace_id`/`span_id` of the active span.

    Resolved per event rather than bound once per request: the active span changes
    as the request moves through the downstream call and the queue publish.
    """

    def processor(_: Any, __: str, event_dict: EventDict) -> EventDict:
        for key, value in telemetry.linking_metadata().items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Events emitted outside any span (startup/shutdown) simply carry no trace ids.

"""
tests.test_settings

Environment-driven configuration.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from trace_relay.settings import Settings


def test_function_app_settings_use_bare_names(monkeypatch) -> None:
    monkeypatch.setenv(
        "SERVICE_BUS_CONNECTION",
        "Endpoint=sb://ns.servicebus.windows.net/;SharedAccessKeyName=k;SharedAccessKey=secret",
    )
    monkeypatch.setenv("SERVICE_BUS_QUEUE", "orders")
    monkeypatch.setenv("URL_TO_CALL", "https://other.azurewebsites.net/api/HttpTrigger2")
    monkeypatch.setenv("RELAY_MAX_MESSAGES", "3")

    settings = Settings()

    assert settings.service_bus_queue == "orders"
    assert settings.url_to_call == "https://other.azurewebsites.net/api/HttpTrigger2"
    assert settings.max_messages == 3
    assert "secret" not in repr(settings)


def test_message_bounds_are_validated() -> None:
    with pytest.raises(ValidationError):
        Settings(min_messages=4, max_messages=2)


def test_connection_without_queue_is_rejected() -> None:
    with pytest.raises(ValidationError, match="SERVICE_BUS_QUEUE is required"):
        Settings(
            service_bus_connection="Endpoint=sb://ns.servicebus.windows.net/;SharedAccessKey=s",
            service_bus_queue="",
        )

"""
trace_relay.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Read the function app settings (`SERVICE_BUS_CONNECTION`, `SERVICE_BUS_QUEUE`,
  `URL_TO_CALL`) under their bare names.
- Hide secrets from repr/logging (e.g., the Service Bus connection string).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Service configuration.

    Relay-specific knobs use the `RELAY_` prefix; the three application settings
    shared with the function host keep their unprefixed names.
    """

    model_config = SettingsConfigDict(
        env_prefix="RELAY_",
        case_sensitive=False,
        populate_by_name=True,
    )

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "trace-relay"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Downstream function app
    url_to_call: str = Field(
        default="http://localhost:7071/api/HttpTrigger2",
        validation_alias=AliasChoices("URL_TO_CALL", "RELAY_URL_TO_CALL"),
    )

    # Service Bus
    service_bus_connection: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("SERVICE_BUS_CONNECTION", "RELAY_SERVICE_BUS_CONNECTION"),
    )
    service_bus_queue: str = Field(
        default="",
        validation_alias=AliasChoices("SERVICE_BUS_QUEUE", "RELAY_SERVICE_BUS_QUEUE"),
    )

    # Batch sizing; the message count is drawn uniformly from [min_messages, max_messages].
    min_messages: int = Field(default=1, ge=1)
    max_messages: int = Field(default=5, ge=1)

    # When true, a failed publish turns the response into a 502.
    fail_on_publish_error: bool = False

    # Tracing export; spans are dropped when no endpoint is configured.
    otlp_endpoint: str | None = None

    @model_validator(mode="after")
    def _check_message_bounds(self) -> Settings:
        if self.min_messages > self.max_messages:
            raise ValueError("min_messages must not exceed max_messages")
        return self

    @model_validator(mode="after")
    def _check_queue_configured(self) -> Settings:
        # Fail at startup rather than on every publish.
        if self.service_bus_connection and not self.service_bus_queue:
            raise ValueError("SERVICE_BUS_QUEUE is required when SERVICE_BUS_CONNECTION is set")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The function host injects application settings as plain environment variables,
# which is why the shared names bypass the `RELAY_` prefix.

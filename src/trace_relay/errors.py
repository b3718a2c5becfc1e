"""
trace_relay.errors

Domain exceptions raised by the relay.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for relay failures."""


class MessageTooLargeError(RelayError):
    """A message (with its trace properties attached) does not fit in the batch."""

    def __init__(self, index: int) -> None:
        super().__init__(f"The message {index} is too large to fit in the batch.")
        self.index = index


class PublishError(RelayError):
    """Opening a sender or sending the batch failed."""


# --- Module Notes -----------------------------------------------------------
# Only `RelayError` subclasses are absorbed by the service layer; SDK and transport
# exceptions are wrapped before they get there or left to fail the request.

"""Error taxonomy shared by both transports.

Only three kinds of failure reach callers: bad configuration (raised when a
client is built), timeouts and transport errors (raised by a call). A backend
that does not implement an operation, or does not know the requested entity,
produces an empty response instead of an error.
"""

from __future__ import annotations

import enum
import math
from typing import ClassVar


class ErrorKind(enum.Enum):
    TIMEOUT = "timeout"
    TRANSPORT_ERROR = "transport-error"
    CONFIGURATION_ERROR = "configuration-error"


class JaegerQueryError(Exception):
    """Base class for every error raised by this package."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(JaegerQueryError, ValueError):
    """Invalid client configuration. Raised at construction, never mid-call."""

    kind = ErrorKind.CONFIGURATION_ERROR


class RequestTimeoutError(JaegerQueryError, TimeoutError):
    """The call did not complete within the configured request timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(format_timeout_message(timeout_ms))
        self.timeout_ms = timeout_ms


class TransportError(JaegerQueryError):
    """Any other call failure: connection, protocol status, bad payload."""

    kind = ErrorKind.TRANSPORT_ERROR


def format_timeout_message(timeout_ms: int) -> str:
    # Half-up rounding: 1500ms reads as 2s.
    seconds = math.floor(timeout_ms / 1000 + 0.5)
    return f"Request timed out after {seconds}s"

"""Client configuration."""

from __future__ import annotations

import enum
import os
from collections.abc import Mapping
from dataclasses import dataclass

from jaeger_query._errors import ConfigurationError

DEFAULT_REQUEST_TIMEOUT_MS = 60_000
MAX_REQUEST_TIMEOUT_MS = 300_000

_MAX_PORT = 65535


class Protocol(enum.Enum):
    """Wire protocol used to reach the query backend."""

    GRPC = "grpc"
    HTTP = "http"

    @classmethod
    def parse(cls, value: str | Protocol) -> Protocol:
        """Parse a protocol name. ``streaming`` and ``rest`` are accepted aliases."""
        if isinstance(value, Protocol):
            return value
        name = str(value).strip().lower()
        name = _PROTOCOL_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            msg = f"Invalid Jaeger protocol: {value}"
            raise ConfigurationError(msg) from None


_PROTOCOL_ALIASES = {"streaming": "grpc", "rest": "http"}


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection configuration, validated on construction."""

    url: str
    port: int | None = None
    authorization_header: str | None = None
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    protocol: Protocol = Protocol.GRPC
    debug: bool = False

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            msg = "No Jaeger URL is specified"
            raise ConfigurationError(msg)
        if self.port is not None and not 0 < self.port <= _MAX_PORT:
            msg = f"Invalid Jaeger port: must be between 1 and {_MAX_PORT}. Got: {self.port}"
            raise ConfigurationError(msg)
        if self.request_timeout_ms <= 0:
            msg = f"Invalid request timeout: must be positive. Got: {self.request_timeout_ms}"
            raise ConfigurationError(msg)
        if self.request_timeout_ms > MAX_REQUEST_TIMEOUT_MS:
            msg = (
                f"Invalid request timeout: must be at most {MAX_REQUEST_TIMEOUT_MS} "
                f"({MAX_REQUEST_TIMEOUT_MS // 1000}s). Got: {self.request_timeout_ms}"
            )
            raise ConfigurationError(msg)
        # Frozen dataclass: normalize string protocols in place.
        object.__setattr__(self, "protocol", Protocol.parse(self.protocol))

    @property
    def request_timeout_s(self) -> float:
        return self.request_timeout_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """Build a configuration from ``JAEGER_*`` environment variables.

        Reads ``JAEGER_URL`` (required), ``JAEGER_PORT``,
        ``JAEGER_AUTHORIZATION_HEADER``, ``JAEGER_REQUEST_TIMEOUT_MS``,
        ``JAEGER_PROTOCOL`` (``GRPC`` or ``HTTP``) and ``JAEGER_DEBUG=1``.
        """
        env = os.environ if environ is None else environ

        url = env.get("JAEGER_URL", "")
        if not url:
            msg = 'No Jaeger URL (by "JAEGER_URL" environment variable) is specified'
            raise ConfigurationError(msg)

        timeout_ms = _parse_int(env, "JAEGER_REQUEST_TIMEOUT_MS")
        return cls(
            url=url,
            port=_parse_int(env, "JAEGER_PORT"),
            authorization_header=env.get("JAEGER_AUTHORIZATION_HEADER") or None,
            request_timeout_ms=(
                DEFAULT_REQUEST_TIMEOUT_MS if timeout_ms is None else timeout_ms
            ),
            protocol=Protocol.parse(env.get("JAEGER_PROTOCOL") or Protocol.GRPC),
            debug=env.get("JAEGER_DEBUG") == "1",
        )


def _parse_int(env: Mapping[str, str], name: str) -> int | None:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw.strip())
    except ValueError:
        msg = f"Invalid {name}: must be an integer. Got: {raw!r}"
        raise ConfigurationError(msg) from None

"""Endpoint URL/port resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass

GRPC_DEFAULT_PORT = 16685
HTTP_DEFAULT_PORT = 16686

SECURE_PORT = 443
_SCHEME_SEPARATOR = "://"
_SECURE_SCHEME = "https://"
_INSECURE_SCHEME = "http://"
_TRAILING_PORT_RE = re.compile(r"^(.+):(\d+)$")


@dataclass(frozen=True)
class Endpoint:
    """A resolved backend endpoint.

    ``host`` always carries a scheme (``http://`` or ``https://``) and never
    a port.
    """

    host: str
    port: int
    secure: bool

    @property
    def base_url(self) -> str:
        """``scheme://host:port``, for HTTP requests."""
        return f"{self.host}:{self.port}"

    @property
    def target(self) -> str:
        """``host:port`` without scheme, for gRPC channels."""
        bare = self.host.split(_SCHEME_SEPARATOR, 1)[-1]
        return f"{bare}:{self.port}"


def resolve_endpoint(
    url: str,
    port: int | None = None,
    *,
    default_port: int = HTTP_DEFAULT_PORT,
) -> Endpoint:
    """Resolve a user-supplied URL and optional port into an :class:`Endpoint`.

    A port embedded in the URL wins over ``port``. Without either, ``https``
    URLs use 443 and everything else ``default_port``. A URL given without a
    scheme is treated as secure when it resolves to port 443.
    """
    normalized = url.strip().rstrip("/")
    has_scheme = _SCHEME_SEPARATOR in normalized
    if not has_scheme:
        scheme = _SECURE_SCHEME if port == SECURE_PORT else _INSECURE_SCHEME
        normalized = f"{scheme}{normalized}"

    match = _TRAILING_PORT_RE.match(normalized)
    if match:
        host, resolved_port = match.group(1), int(match.group(2))
        if (
            not has_scheme
            and resolved_port == SECURE_PORT
            and host.startswith(_INSECURE_SCHEME)
        ):
            host = _SECURE_SCHEME + host.removeprefix(_INSECURE_SCHEME)
    else:
        host = normalized
        if port is not None:
            resolved_port = port
        elif host.startswith(_SECURE_SCHEME):
            resolved_port = SECURE_PORT
        else:
            resolved_port = default_port

    return Endpoint(
        host=host,
        port=resolved_port,
        secure=host.startswith(_SECURE_SCHEME),
    )

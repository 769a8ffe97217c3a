"""Id, timestamp and duration conversions shared by both transports."""

from __future__ import annotations

import base64
import binascii
import re
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_TRACE_ID_RE = re.compile(r"^[0-9a-fA-F]{32}$")
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def ms_to_seconds_nanos(ms: int) -> tuple[int, int]:
    """Split epoch milliseconds into a protobuf ``(seconds, nanos)`` pair."""
    return ms // 1000, (ms % 1000) * 1_000_000


def seconds_nanos_to_ms(seconds: int, nanos: int) -> int:
    """Inverse of :func:`ms_to_seconds_nanos`. Sub-millisecond nanos are dropped."""
    return seconds * 1000 + nanos // 1_000_000


def ms_to_rfc3339(ms: int) -> str:
    """Format epoch milliseconds as ``2024-01-01T00:00:00.000Z``."""
    dt = _EPOCH + timedelta(milliseconds=ms)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def ms_to_duration_param(ms: int) -> str:
    return f"{ms}ms"


def id_to_hex(raw: bytes) -> str:
    """Encode a binary trace/span id as lowercase hex, ``""`` when empty."""
    return raw.hex()


def normalize_json_id(value: str | None) -> str:
    """Normalize a trace/span id taken from a JSON document.

    Hex ids are lower-cased. Anything else is treated as the base64 form that
    protobuf's JSON mapping uses for ``bytes`` fields and re-encoded as hex.
    """
    if not value:
        return ""
    if len(value) % 2 == 0 and _HEX_RE.match(value):
        return value.lower()
    try:
        return base64.b64decode(value, validate=True).hex()
    except (binascii.Error, ValueError):
        return value.lower()


def nanos_to_str(value: int | str | None) -> str | None:
    """Render a nanosecond timestamp as a decimal string; zero means absent."""
    if value is None or value == "":
        return None
    nanos = int(value)
    if nanos == 0:
        return None
    return str(nanos)


def validate_trace_id(trace_id: str) -> None:
    """Raise ``ValueError`` unless ``trace_id`` is 32 hexadecimal characters."""
    if not isinstance(trace_id, str) or not _TRACE_ID_RE.match(trace_id):
        got = repr(trace_id) if isinstance(trace_id, str) else type(trace_id).__name__
        msg = f"Invalid trace ID: must be 32 hexadecimal characters. Got: {got}"
        raise ValueError(msg)

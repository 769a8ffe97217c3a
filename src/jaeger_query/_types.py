"""Canonical types: enums, trace entities, requests and responses."""

from __future__ import annotations

import dataclasses
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class SpanKind(enum.Enum):
    """OpenTelemetry span kind."""

    UNSPECIFIED = "unspecified"
    INTERNAL = "internal"
    SERVER = "server"
    CLIENT = "client"
    PRODUCER = "producer"
    CONSUMER = "consumer"


class StatusCode(enum.Enum):
    """OpenTelemetry span status code."""

    UNSET = "unset"
    OK = "ok"
    ERROR = "error"


_SPAN_KIND_NUMBERS: dict[SpanKind, int] = {
    SpanKind.UNSPECIFIED: 0,
    SpanKind.INTERNAL: 1,
    SpanKind.SERVER: 2,
    SpanKind.CLIENT: 3,
    SpanKind.PRODUCER: 4,
    SpanKind.CONSUMER: 5,
}

_STATUS_CODE_NUMBERS: dict[StatusCode, int] = {
    StatusCode.UNSET: 0,
    StatusCode.OK: 1,
    StatusCode.ERROR: 2,
}

_SPAN_KIND_BY_NUMBER = {n: k for k, n in _SPAN_KIND_NUMBERS.items()}
_STATUS_CODE_BY_NUMBER = {n: c for c, n in _STATUS_CODE_NUMBERS.items()}

_SPAN_KIND_PREFIX = "span_kind_"
_STATUS_CODE_PREFIX = "status_code_"


def to_span_kind(value: str | int | None) -> SpanKind | None:
    """Decode a span kind from its wire number or name.

    Names are matched case-insensitively and may carry the protobuf
    ``SPAN_KIND_`` prefix. Unknown values decode to ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _SPAN_KIND_BY_NUMBER.get(value)
    name = value.strip().lower()
    if not name:
        return None
    if name.isdigit():
        return _SPAN_KIND_BY_NUMBER.get(int(name))
    name = name.removeprefix(_SPAN_KIND_PREFIX)
    try:
        return SpanKind(name)
    except ValueError:
        return None


def to_status_code(value: str | int | None) -> StatusCode | None:
    """Decode a status code from its wire number or name."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return _STATUS_CODE_BY_NUMBER.get(value)
    name = value.strip().lower()
    if not name:
        return None
    if name.isdigit():
        return _STATUS_CODE_BY_NUMBER.get(int(name))
    name = name.removeprefix(_STATUS_CODE_PREFIX)
    try:
        return StatusCode(name)
    except ValueError:
        return None


def span_kind_to_number(kind: SpanKind) -> int:
    return _SPAN_KIND_NUMBERS[kind]


def status_code_to_number(code: StatusCode) -> int:
    return _STATUS_CODE_NUMBERS[code]


@dataclass(frozen=True)
class AttributeValue:
    """A scalar attribute value. Exactly one field is set."""

    string_value: str | None = None
    bool_value: bool | None = None
    int_value: int | None = None
    double_value: float | None = None

    @classmethod
    def of(cls, value: str | int | float | bool) -> AttributeValue:
        """Wrap a Python scalar, keeping bool, int and float apart."""
        if isinstance(value, bool):
            return cls(bool_value=value)
        if isinstance(value, int):
            return cls(int_value=value)
        if isinstance(value, float):
            return cls(double_value=value)
        return cls(string_value=str(value))

    @property
    def value(self) -> str | int | float | bool | None:
        for candidate in (
            self.string_value,
            self.bool_value,
            self.int_value,
            self.double_value,
        ):
            if candidate is not None:
                return candidate
        return None


@dataclass(frozen=True)
class Attribute:
    key: str
    value: AttributeValue = field(default_factory=AttributeValue)


@dataclass(frozen=True)
class Resource:
    """The entity (service instance) that produced a group of spans."""

    attributes: tuple[Attribute, ...] = ()
    dropped_attributes_count: int | None = None


@dataclass(frozen=True)
class InstrumentationScope:
    name: str = ""
    version: str | None = None
    attributes: tuple[Attribute, ...] = ()
    dropped_attributes_count: int | None = None


@dataclass(frozen=True)
class Event:
    name: str = ""
    time_unix_nano: str | None = None
    attributes: tuple[Attribute, ...] = ()
    dropped_attributes_count: int | None = None


@dataclass(frozen=True)
class Link:
    trace_id: str = ""
    span_id: str = ""
    trace_state: str | None = None
    attributes: tuple[Attribute, ...] = ()
    dropped_attributes_count: int | None = None


@dataclass(frozen=True)
class Status:
    code: StatusCode = StatusCode.UNSET
    message: str | None = None


@dataclass(frozen=True)
class Span:
    """One timed operation within a trace.

    Ids are lowercase hex (``""`` when absent). Timestamps are nanoseconds
    since the epoch encoded as decimal strings so they survive JSON consumers
    that only have 53-bit numbers.
    """

    trace_id: str = ""
    span_id: str = ""
    parent_span_id: str = ""
    name: str = ""
    kind: SpanKind = SpanKind.UNSPECIFIED
    trace_state: str | None = None
    start_time_unix_nano: str | None = None
    end_time_unix_nano: str | None = None
    attributes: tuple[Attribute, ...] = ()
    dropped_attributes_count: int | None = None
    events: tuple[Event, ...] = ()
    dropped_events_count: int | None = None
    links: tuple[Link, ...] = ()
    dropped_links_count: int | None = None
    status: Status | None = None


@dataclass(frozen=True)
class ScopeSpans:
    scope: InstrumentationScope = field(default_factory=InstrumentationScope)
    spans: tuple[Span, ...] = ()
    schema_url: str | None = None


@dataclass(frozen=True)
class ResourceSpans:
    """Top-level unit returned by trace fetch and trace search."""

    resource: Resource = field(default_factory=Resource)
    scope_spans: tuple[ScopeSpans, ...] = ()
    schema_url: str | None = None


@dataclass(frozen=True)
class Operation:
    name: str
    span_kind: SpanKind = SpanKind.UNSPECIFIED


AttributeFilter = Mapping[str, str | int | float | bool]


@dataclass(frozen=True)
class GetServicesRequest:
    pass


@dataclass(frozen=True)
class GetOperationsRequest:
    service: str
    span_kind: SpanKind | None = None


@dataclass(frozen=True)
class GetTraceRequest:
    """Fetch one trace. ``start_time``/``end_time`` are epoch milliseconds."""

    trace_id: str
    start_time: int | None = None
    end_time: int | None = None
    raw_traces: bool = False


@dataclass(frozen=True)
class TraceQueryParameters:
    """Trace search filters. Times and durations are in milliseconds."""

    service_name: str
    start_time_min: int
    start_time_max: int
    operation_name: str | None = None
    attributes: AttributeFilter | None = None
    duration_min: int | None = None
    duration_max: int | None = None
    search_depth: int | None = None
    raw_traces: bool = False


@dataclass(frozen=True)
class FindTracesRequest:
    query: TraceQueryParameters


@dataclass(frozen=True)
class GetServicesResponse:
    services: tuple[str, ...] = ()


@dataclass(frozen=True)
class GetOperationsResponse:
    operations: tuple[Operation, ...] = ()


@dataclass(frozen=True)
class GetTraceResponse:
    resource_spans: tuple[ResourceSpans, ...] = ()


@dataclass(frozen=True)
class FindTracesResponse:
    resource_spans: tuple[ResourceSpans, ...] = ()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def as_json(value: Any) -> Any:
    """Render a canonical value as OpenTelemetry-shaped JSON data.

    Keys are camelCase, enums become their string value, and ``None`` or
    empty sequences are left out so the output stays compact.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            item = getattr(value, f.name)
            if item is None or (isinstance(item, tuple) and not item):
                continue
            out[_camel(f.name)] = as_json(item)
        return out
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [as_json(v) for v in value]
    if isinstance(value, Mapping):
        return {k: as_json(v) for k, v in value.items()}
    return value

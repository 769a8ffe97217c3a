"""HTTP query client for the ``/api/v3`` JSON endpoints."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

import httpx

from jaeger_query._config import ClientConfig
from jaeger_query._convert import (
    ms_to_duration_param,
    ms_to_rfc3339,
    nanos_to_str,
    normalize_json_id,
)
from jaeger_query._errors import RequestTimeoutError, TransportError
from jaeger_query._types import (
    Attribute,
    AttributeValue,
    Event,
    FindTracesRequest,
    FindTracesResponse,
    GetOperationsRequest,
    GetOperationsResponse,
    GetServicesRequest,
    GetServicesResponse,
    GetTraceRequest,
    GetTraceResponse,
    InstrumentationScope,
    Link,
    Operation,
    Resource,
    ResourceSpans,
    ScopeSpans,
    Span,
    SpanKind,
    Status,
    StatusCode,
    to_span_kind,
    to_status_code,
)
from jaeger_query._url import HTTP_DEFAULT_PORT, resolve_endpoint

logger = logging.getLogger("jaeger_query.http")

_HTTP_OK = 200
_HTTP_NOT_FOUND = 404

JSON = dict[str, Any]
T = TypeVar("T")


class _NotFound(Exception):
    pass


def _compact(params: Mapping[str, Any]) -> dict[str, str]:
    """Drop absent values and render the rest as query-string text."""
    out: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            out[key] = "true" if value else "false"
        else:
            out[key] = str(value)
    return out


def _opt(fn: Callable[[int], str], value: int | None) -> str | None:
    return None if value is None else fn(value)


def _build_operations_params(request: GetOperationsRequest) -> dict[str, str]:
    return _compact(
        {
            "service": request.service,
            "span_kind": request.span_kind.value if request.span_kind else None,
        }
    )


def _build_trace_params(request: GetTraceRequest) -> dict[str, str]:
    return _compact(
        {
            "startTime": _opt(ms_to_rfc3339, request.start_time),
            "endTime": _opt(ms_to_rfc3339, request.end_time),
            "raw_traces": request.raw_traces or None,
        }
    )


def _build_find_traces_params(request: FindTracesRequest) -> dict[str, str]:
    q = request.query
    return _compact(
        {
            "query.service_name": q.service_name,
            "query.operation_name": q.operation_name,
            "query.start_time_min": _opt(ms_to_rfc3339, q.start_time_min),
            "query.start_time_max": _opt(ms_to_rfc3339, q.start_time_max),
            "query.duration_min": _opt(ms_to_duration_param, q.duration_min),
            "query.duration_max": _opt(ms_to_duration_param, q.duration_max),
            "query.search_depth": q.search_depth,
            "query.attributes": (
                json.dumps(dict(q.attributes), separators=(",", ":"))
                if q.attributes
                else None
            ),
            "query.raw_traces": q.raw_traces or None,
        }
    )


def _as_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)


def _as_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValueError(f"invalid boolValue: {value!r}")


def _attribute_from_json(data: JSON) -> Attribute:
    # Protobuf's JSON mapping renders int64 as strings; coerce back to numbers.
    raw = data.get("value") or {}
    if "stringValue" in raw:
        value = AttributeValue(string_value=str(raw["stringValue"]))
    elif "boolValue" in raw:
        value = AttributeValue(bool_value=_as_bool(raw["boolValue"]))
    elif "intValue" in raw:
        value = AttributeValue(int_value=_as_int(raw["intValue"]))
    elif "doubleValue" in raw:
        value = AttributeValue(double_value=_as_float(raw["doubleValue"]))
    else:
        value = AttributeValue()
    return Attribute(key=str(data.get("key", "")), value=value)


def _attributes(items: list[JSON] | None) -> tuple[Attribute, ...]:
    return tuple(_attribute_from_json(a) for a in items or ())


def _resource_from_json(data: JSON | None) -> Resource:
    data = data or {}
    return Resource(
        attributes=_attributes(data.get("attributes")),
        dropped_attributes_count=_as_int(data.get("droppedAttributesCount")) or None,
    )


def _scope_from_json(data: JSON | None) -> InstrumentationScope:
    data = data or {}
    return InstrumentationScope(
        name=data.get("name") or "",
        version=data.get("version") or None,
        attributes=_attributes(data.get("attributes")),
        dropped_attributes_count=_as_int(data.get("droppedAttributesCount")) or None,
    )


def _event_from_json(data: JSON) -> Event:
    return Event(
        name=data.get("name") or "",
        time_unix_nano=nanos_to_str(data.get("timeUnixNano")),
        attributes=_attributes(data.get("attributes")),
        dropped_attributes_count=_as_int(data.get("droppedAttributesCount")) or None,
    )


def _link_from_json(data: JSON) -> Link:
    return Link(
        trace_id=normalize_json_id(data.get("traceId")),
        span_id=normalize_json_id(data.get("spanId")),
        trace_state=data.get("traceState") or None,
        attributes=_attributes(data.get("attributes")),
        dropped_attributes_count=_as_int(data.get("droppedAttributesCount")) or None,
    )


def _status_from_json(data: JSON | None) -> Status | None:
    if data is None:
        return None
    return Status(
        code=to_status_code(data.get("code")) or StatusCode.UNSET,
        message=data.get("message") or None,
    )


def _span_from_json(data: JSON) -> Span:
    return Span(
        trace_id=normalize_json_id(data.get("traceId")),
        span_id=normalize_json_id(data.get("spanId")),
        parent_span_id=normalize_json_id(data.get("parentSpanId")),
        name=data.get("name") or "",
        kind=to_span_kind(data.get("kind")) or SpanKind.UNSPECIFIED,
        trace_state=data.get("traceState") or None,
        start_time_unix_nano=nanos_to_str(data.get("startTimeUnixNano")),
        end_time_unix_nano=nanos_to_str(data.get("endTimeUnixNano")),
        attributes=_attributes(data.get("attributes")),
        dropped_attributes_count=_as_int(data.get("droppedAttributesCount")) or None,
        events=tuple(_event_from_json(e) for e in data.get("events") or ()),
        dropped_events_count=_as_int(data.get("droppedEventsCount")) or None,
        links=tuple(_link_from_json(link) for link in data.get("links") or ()),
        dropped_links_count=_as_int(data.get("droppedLinksCount")) or None,
        status=_status_from_json(data.get("status")),
    )


def _scope_spans_from_json(data: JSON) -> ScopeSpans:
    return ScopeSpans(
        scope=_scope_from_json(data.get("scope")),
        spans=tuple(_span_from_json(s) for s in data.get("spans") or ()),
        schema_url=data.get("schemaUrl") or None,
    )


def _resource_spans_from_json(items: list[JSON] | None) -> tuple[ResourceSpans, ...]:
    return tuple(
        ResourceSpans(
            resource=_resource_from_json(rs.get("resource")),
            scope_spans=tuple(
                _scope_spans_from_json(ss) for ss in rs.get("scopeSpans") or ()
            ),
            schema_url=rs.get("schemaUrl") or None,
        )
        for rs in items or ()
    )


def _traces_from_json(body: JSON) -> tuple[ResourceSpans, ...]:
    result = body.get("result") or {}
    return _resource_spans_from_json(result.get("resourceSpans"))


def _operation_from_json(data: JSON) -> Operation:
    return Operation(
        name=data.get("name") or "",
        span_kind=to_span_kind(data.get("spanKind")) or SpanKind.UNSPECIFIED,
    )


class HttpJaegerClient:
    """Queries the ``/api/v3`` HTTP endpoints and normalizes their JSON.

    A 404 is reported as an empty response, matching the gRPC client's
    handling of unimplemented methods.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._endpoint = resolve_endpoint(
            config.url, config.port, default_port=HTTP_DEFAULT_PORT
        )
        self._timeout_ms = config.request_timeout_ms
        self._timeout_s = config.request_timeout_s
        self._debug = config.debug
        headers: dict[str, str] = {}
        if config.authorization_header:
            headers["Authorization"] = config.authorization_header
        self._client = httpx.AsyncClient(
            base_url=self._endpoint.base_url,
            headers=headers,
            timeout=self._timeout_s,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._endpoint.base_url

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpJaegerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get(self, path: str, params: Mapping[str, str] | None = None) -> JSON:
        try:
            # wait_for cancels the in-flight request once the budget is spent.
            response = await asyncio.wait_for(
                self._client.get(path, params=params), timeout=self._timeout_s
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as err:
            raise RequestTimeoutError(self._timeout_ms) from err
        except httpx.HTTPError as err:
            raise TransportError(str(err) or type(err).__name__) from err

        if response.status_code == _HTTP_NOT_FOUND:
            raise _NotFound(path)
        if response.status_code != _HTTP_OK:
            msg = f"Request failed with status code {response.status_code}"
            raise TransportError(msg)
        try:
            body = response.json()
        except ValueError as err:
            msg = f"Malformed response from {path}: {err}"
            raise TransportError(msg) from err
        if not isinstance(body, dict):
            msg = f"Malformed response from {path}: expected a JSON object"
            raise TransportError(msg)
        return body

    @staticmethod
    def _decode(path: str, fn: Callable[[JSON], T], body: JSON) -> T:
        try:
            return fn(body)
        except (AttributeError, TypeError, ValueError) as err:
            msg = f"Malformed response from {path}: {err}"
            raise TransportError(msg) from err

    async def get_services(self, request: GetServicesRequest) -> GetServicesResponse:
        path = "/api/v3/services"
        try:
            body = await self._get(path)
        except _NotFound:
            return GetServicesResponse()
        return self._decode(
            path,
            lambda b: GetServicesResponse(
                services=tuple(str(s) for s in b.get("services") or ())
            ),
            body,
        )

    async def get_operations(
        self, request: GetOperationsRequest
    ) -> GetOperationsResponse:
        path = "/api/v3/operations"
        try:
            body = await self._get(path, _build_operations_params(request))
        except _NotFound:
            return GetOperationsResponse()
        return self._decode(
            path,
            lambda b: GetOperationsResponse(
                operations=tuple(
                    _operation_from_json(op) for op in b.get("operations") or ()
                )
            ),
            body,
        )

    async def get_trace(self, request: GetTraceRequest) -> GetTraceResponse:
        path = f"/api/v3/traces/{request.trace_id}"
        try:
            body = await self._get(path, _build_trace_params(request))
        except _NotFound:
            return GetTraceResponse()
        return GetTraceResponse(
            resource_spans=self._decode(path, _traces_from_json, body)
        )

    async def find_traces(self, request: FindTracesRequest) -> FindTracesResponse:
        params = _build_find_traces_params(request)
        if self._debug:
            logger.debug(
                "findTraces request %s base_url=%s",
                json.dumps(params),
                self.base_url,
            )
        t0 = time.monotonic()
        try:
            body = await self._get("/api/v3/traces", params)
        except _NotFound:
            return FindTracesResponse()
        except (RequestTimeoutError, TransportError) as err:
            logger.debug(
                "findTraces failed after %.0fms: %s",
                (time.monotonic() - t0) * 1000,
                err.message,
            )
            raise
        resource_spans = self._decode("/api/v3/traces", _traces_from_json, body)
        if self._debug:
            logger.debug(
                "findTraces response in %.0fms, resource_spans=%d",
                (time.monotonic() - t0) * 1000,
                len(resource_spans),
            )
        return FindTracesResponse(resource_spans=resource_spans)

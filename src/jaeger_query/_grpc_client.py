"""gRPC query client: builds api_v3 requests and decodes streamed TracesData."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Any, TypeVar

import grpc
from google.protobuf import duration_pb2, timestamp_pb2
from opentelemetry.proto.common.v1.common_pb2 import (
    InstrumentationScope as OtlpInstrumentationScope,
)
from opentelemetry.proto.common.v1.common_pb2 import KeyValue
from opentelemetry.proto.resource.v1.resource_pb2 import Resource as OtlpResource
from opentelemetry.proto.trace.v1.trace_pb2 import ResourceSpans as OtlpResourceSpans
from opentelemetry.proto.trace.v1.trace_pb2 import ScopeSpans as OtlpScopeSpans
from opentelemetry.proto.trace.v1.trace_pb2 import Span as OtlpSpan
from opentelemetry.proto.trace.v1.trace_pb2 import Status as OtlpStatus

from jaeger_query import _proto
from jaeger_query._config import ClientConfig
from jaeger_query._convert import id_to_hex, ms_to_seconds_nanos, nanos_to_str
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
from jaeger_query._url import GRPC_DEFAULT_PORT, resolve_endpoint

logger = logging.getLogger("jaeger_query.grpc")

R = TypeVar("R")


def _to_timestamp(ms: int | None) -> timestamp_pb2.Timestamp | None:
    if ms is None:
        return None
    seconds, nanos = ms_to_seconds_nanos(ms)
    return timestamp_pb2.Timestamp(seconds=seconds, nanos=nanos)


def _to_duration(ms: int | None) -> duration_pb2.Duration | None:
    if ms is None:
        return None
    seconds, nanos = ms_to_seconds_nanos(ms)
    return duration_pb2.Duration(seconds=seconds, nanos=nanos)


def _attribute_filter_value(value: str | int | float | bool) -> str:
    """The api_v3 attribute filter is ``map<string, string>``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _without_none(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def _build_get_operations_request(request: GetOperationsRequest) -> Any:
    span_kind = request.span_kind.value if request.span_kind is not None else None
    return _proto.GetOperationsRequest(
        **_without_none(service=request.service, span_kind=span_kind)
    )


def _build_get_trace_request(request: GetTraceRequest) -> Any:
    return _proto.GetTraceRequest(
        **_without_none(
            trace_id=request.trace_id,
            start_time=_to_timestamp(request.start_time),
            end_time=_to_timestamp(request.end_time),
            raw_traces=request.raw_traces or None,
        )
    )


def _build_find_traces_request(request: FindTracesRequest) -> Any:
    q = request.query
    attributes = (
        {k: _attribute_filter_value(v) for k, v in q.attributes.items()}
        if q.attributes
        else None
    )
    query = _proto.TraceQueryParameters(
        **_without_none(
            service_name=q.service_name,
            operation_name=q.operation_name,
            attributes=attributes,
            start_time_min=_to_timestamp(q.start_time_min),
            start_time_max=_to_timestamp(q.start_time_max),
            duration_min=_to_duration(q.duration_min),
            duration_max=_to_duration(q.duration_max),
            search_depth=q.search_depth,
            raw_traces=q.raw_traces or None,
        )
    )
    return _proto.FindTracesRequest(query=query)


def _attribute_from_otlp(kv: KeyValue) -> Attribute:
    which = kv.value.WhichOneof("value")
    if which == "string_value":
        value = AttributeValue(string_value=kv.value.string_value)
    elif which == "bool_value":
        value = AttributeValue(bool_value=kv.value.bool_value)
    elif which == "int_value":
        value = AttributeValue(int_value=int(kv.value.int_value))
    elif which == "double_value":
        value = AttributeValue(double_value=float(kv.value.double_value))
    else:
        value = AttributeValue()
    return Attribute(key=kv.key, value=value)


def _attributes(kvs: Iterable[KeyValue]) -> tuple[Attribute, ...]:
    return tuple(_attribute_from_otlp(kv) for kv in kvs)


def _resource_from_otlp(r: OtlpResource) -> Resource:
    return Resource(
        attributes=_attributes(r.attributes),
        dropped_attributes_count=r.dropped_attributes_count or None,
    )


def _scope_from_otlp(s: OtlpInstrumentationScope) -> InstrumentationScope:
    return InstrumentationScope(
        name=s.name,
        version=s.version or None,
        attributes=_attributes(s.attributes),
        dropped_attributes_count=s.dropped_attributes_count or None,
    )


def _event_from_otlp(e: OtlpSpan.Event) -> Event:
    return Event(
        name=e.name,
        time_unix_nano=nanos_to_str(e.time_unix_nano),
        attributes=_attributes(e.attributes),
        dropped_attributes_count=e.dropped_attributes_count or None,
    )


def _link_from_otlp(link: OtlpSpan.Link) -> Link:
    return Link(
        trace_id=id_to_hex(link.trace_id),
        span_id=id_to_hex(link.span_id),
        trace_state=link.trace_state or None,
        attributes=_attributes(link.attributes),
        dropped_attributes_count=link.dropped_attributes_count or None,
    )


def _status_from_otlp(s: OtlpStatus) -> Status:
    return Status(
        code=to_status_code(int(s.code)) or StatusCode.UNSET,
        message=s.message or None,
    )


def _span_from_otlp(s: OtlpSpan) -> Span:
    return Span(
        trace_id=id_to_hex(s.trace_id),
        span_id=id_to_hex(s.span_id),
        parent_span_id=id_to_hex(s.parent_span_id),
        name=s.name,
        kind=to_span_kind(int(s.kind)) or SpanKind.UNSPECIFIED,
        trace_state=s.trace_state or None,
        start_time_unix_nano=nanos_to_str(s.start_time_unix_nano),
        end_time_unix_nano=nanos_to_str(s.end_time_unix_nano),
        attributes=_attributes(s.attributes),
        dropped_attributes_count=s.dropped_attributes_count or None,
        events=tuple(_event_from_otlp(e) for e in s.events),
        dropped_events_count=s.dropped_events_count or None,
        links=tuple(_link_from_otlp(link) for link in s.links),
        dropped_links_count=s.dropped_links_count or None,
        status=_status_from_otlp(s.status) if s.HasField("status") else None,
    )


def _scope_spans_from_otlp(ss: OtlpScopeSpans) -> ScopeSpans:
    return ScopeSpans(
        scope=_scope_from_otlp(ss.scope),
        spans=tuple(_span_from_otlp(s) for s in ss.spans),
        schema_url=ss.schema_url or None,
    )


def _resource_spans_from_otlp(rs: OtlpResourceSpans) -> ResourceSpans:
    return ResourceSpans(
        resource=_resource_from_otlp(rs.resource),
        scope_spans=tuple(_scope_spans_from_otlp(ss) for ss in rs.scope_spans),
        schema_url=rs.schema_url or None,
    )


def _operation_from_proto(op: Any) -> Operation:
    return Operation(
        name=op.name,
        span_kind=to_span_kind(op.span_kind) or SpanKind.UNSPECIFIED,
    )


class GrpcJaegerClient:
    """Queries ``jaeger.api_v3.QueryService`` over gRPC.

    ``GetTrace`` and ``FindTraces`` are server-streaming: every chunk is
    consumed until end-of-stream and their resource spans are concatenated in
    arrival order. A failure at any point discards what was received.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._endpoint = resolve_endpoint(
            config.url, config.port, default_port=GRPC_DEFAULT_PORT
        )
        self._timeout_ms = config.request_timeout_ms
        self._timeout_s = config.request_timeout_s
        self._debug = config.debug
        self._metadata: tuple[tuple[str, str], ...] | None = None
        if config.authorization_header:
            self._metadata = (("authorization", config.authorization_header),)
        self._credentials: grpc.ChannelCredentials | None = (
            grpc.ssl_channel_credentials() if self._endpoint.secure else None
        )
        self._channel: grpc.aio.Channel | None = None

    @property
    def target(self) -> str:
        return self._endpoint.target

    def _get_channel(self) -> grpc.aio.Channel:
        # Opened on first use so the channel binds to the caller's event loop.
        if self._channel is None:
            if self._credentials is not None:
                self._channel = grpc.aio.secure_channel(
                    self._endpoint.target, self._credentials
                )
            else:
                self._channel = grpc.aio.insecure_channel(self._endpoint.target)
        return self._channel

    async def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        if self._channel is not None:
            channel, self._channel = self._channel, None
            await channel.close()

    async def __aenter__(self) -> GrpcJaegerClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _unary(self, method: str, request: Any, response_type: Any) -> Any:
        call = self._get_channel().unary_unary(
            _proto.method_path(method),
            request_serializer=type(request).SerializeToString,
            response_deserializer=response_type.FromString,
        )
        return await call(request, timeout=self._timeout_s, metadata=self._metadata)

    async def _server_stream(
        self, method: str, request: Any
    ) -> list[OtlpResourceSpans]:
        call = self._get_channel().unary_stream(
            _proto.method_path(method),
            request_serializer=type(request).SerializeToString,
            response_deserializer=_proto.TracesData.FromString,
        )
        resource_spans: list[OtlpResourceSpans] = []
        chunks = 0
        async for chunk in call(
            request, timeout=self._timeout_s, metadata=self._metadata
        ):
            chunks += 1
            resource_spans.extend(chunk.resource_spans)
        if self._debug:
            logger.debug(
                "%s stream ended after %d chunks, %d resource spans",
                method,
                chunks,
                len(resource_spans),
            )
        return resource_spans

    def _handle_error(self, err: grpc.aio.AioRpcError, method: str, empty: R) -> R:
        code = err.code()
        if code == grpc.StatusCode.UNIMPLEMENTED:
            logger.debug("%s is not implemented by %s", method, self.target)
            return empty
        if code == grpc.StatusCode.NOT_FOUND:
            return empty
        if code == grpc.StatusCode.DEADLINE_EXCEEDED:
            raise RequestTimeoutError(self._timeout_ms) from err
        raise TransportError(err.details() or code.name) from err

    async def get_services(self, request: GetServicesRequest) -> GetServicesResponse:
        try:
            response = await self._unary(
                "GetServices", _proto.GetServicesRequest(), _proto.GetServicesResponse
            )
        except grpc.aio.AioRpcError as err:
            return self._handle_error(err, "GetServices", GetServicesResponse())
        return GetServicesResponse(services=tuple(response.services))

    async def get_operations(
        self, request: GetOperationsRequest
    ) -> GetOperationsResponse:
        try:
            response = await self._unary(
                "GetOperations",
                _build_get_operations_request(request),
                _proto.GetOperationsResponse,
            )
        except grpc.aio.AioRpcError as err:
            return self._handle_error(err, "GetOperations", GetOperationsResponse())
        return GetOperationsResponse(
            operations=tuple(_operation_from_proto(op) for op in response.operations)
        )

    async def get_trace(self, request: GetTraceRequest) -> GetTraceResponse:
        try:
            chunks = await self._server_stream(
                "GetTrace", _build_get_trace_request(request)
            )
        except grpc.aio.AioRpcError as err:
            return self._handle_error(err, "GetTrace", GetTraceResponse())
        return GetTraceResponse(
            resource_spans=tuple(_resource_spans_from_otlp(rs) for rs in chunks)
        )

    async def find_traces(self, request: FindTracesRequest) -> FindTracesResponse:
        grpc_request = _build_find_traces_request(request)
        if self._debug:
            logger.debug(
                "FindTraces request service=%s operation=%s start_min=%s "
                "start_max=%s search_depth=%s",
                request.query.service_name,
                request.query.operation_name,
                request.query.start_time_min,
                request.query.start_time_max,
                request.query.search_depth,
            )
        t0 = time.monotonic()
        try:
            chunks = await self._server_stream("FindTraces", grpc_request)
        except grpc.aio.AioRpcError as err:
            logger.debug(
                "FindTraces failed after %.0fms: %s",
                (time.monotonic() - t0) * 1000,
                err.code().name,
            )
            return self._handle_error(err, "FindTraces", FindTracesResponse())
        if self._debug:
            logger.debug(
                "FindTraces response in %.0fms, resource_spans=%d",
                (time.monotonic() - t0) * 1000,
                len(chunks),
            )
        return FindTracesResponse(
            resource_spans=tuple(_resource_spans_from_otlp(rs) for rs in chunks)
        )

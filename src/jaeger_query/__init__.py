"""jaeger_query: async Jaeger query client over gRPC or HTTP."""

from __future__ import annotations

from jaeger_query._client import JaegerClient, create_client
from jaeger_query._config import (
    DEFAULT_REQUEST_TIMEOUT_MS,
    MAX_REQUEST_TIMEOUT_MS,
    ClientConfig,
    Protocol,
)
from jaeger_query._convert import validate_trace_id
from jaeger_query._errors import (
    ConfigurationError,
    ErrorKind,
    JaegerQueryError,
    RequestTimeoutError,
    TransportError,
)
from jaeger_query._grpc_client import GrpcJaegerClient
from jaeger_query._http_client import HttpJaegerClient
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
    TraceQueryParameters,
    as_json,
    to_span_kind,
    to_status_code,
)

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_REQUEST_TIMEOUT_MS",
    "MAX_REQUEST_TIMEOUT_MS",
    "Attribute",
    "AttributeValue",
    "ClientConfig",
    "ConfigurationError",
    "ErrorKind",
    "Event",
    "FindTracesRequest",
    "FindTracesResponse",
    "GetOperationsRequest",
    "GetOperationsResponse",
    "GetServicesRequest",
    "GetServicesResponse",
    "GetTraceRequest",
    "GetTraceResponse",
    "GrpcJaegerClient",
    "HttpJaegerClient",
    "InstrumentationScope",
    "JaegerClient",
    "JaegerQueryError",
    "Link",
    "Operation",
    "Protocol",
    "RequestTimeoutError",
    "Resource",
    "ResourceSpans",
    "ScopeSpans",
    "Span",
    "SpanKind",
    "Status",
    "StatusCode",
    "TraceQueryParameters",
    "TransportError",
    "__version__",
    "as_json",
    "create_client",
    "to_span_kind",
    "to_status_code",
    "validate_trace_id",
]

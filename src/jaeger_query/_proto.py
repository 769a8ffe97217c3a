"""Protobuf messages of the ``jaeger.api_v3`` query service.

The service's request/response messages are not published in any Python
distribution, so their descriptor is assembled here and registered in the
default descriptor pool next to the OpenTelemetry trace messages it depends
on. ``GetTrace`` and ``FindTraces`` stream
``opentelemetry.proto.trace.v1.TracesData``.
"""

from __future__ import annotations

from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf import duration_pb2, timestamp_pb2
from opentelemetry.proto.trace.v1 import trace_pb2

PACKAGE = "jaeger.api_v3"
SERVICE = f"{PACKAGE}.QueryService"
FILE_NAME = "jaeger/api_v3/query_service.proto"

_F = descriptor_pb2.FieldDescriptorProto


def method_path(name: str) -> str:
    """Full gRPC method path, e.g. ``/jaeger.api_v3.QueryService/GetTrace``."""
    return f"/{SERVICE}/{name}"


def _field(
    name: str,
    number: int,
    type_: int,
    *,
    type_name: str | None = None,
    repeated: bool = False,
) -> descriptor_pb2.FieldDescriptorProto:
    f = _F(
        name=name,
        number=number,
        type=type_,  # type: ignore[arg-type]
        label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
    )
    if type_name is not None:
        f.type_name = type_name
    return f


def _message(
    name: str,
    *fields: descriptor_pb2.FieldDescriptorProto,
    nested: tuple[descriptor_pb2.DescriptorProto, ...] = (),
) -> descriptor_pb2.DescriptorProto:
    return descriptor_pb2.DescriptorProto(
        name=name, field=list(fields), nested_type=list(nested)
    )


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    timestamp = ".google.protobuf.Timestamp"
    duration = ".google.protobuf.Duration"

    attributes_entry = descriptor_pb2.DescriptorProto(
        name="AttributesEntry",
        field=[
            _field("key", 1, _F.TYPE_STRING),
            _field("value", 2, _F.TYPE_STRING),
        ],
        options=descriptor_pb2.MessageOptions(map_entry=True),
    )

    messages = [
        _message(
            "GetTraceRequest",
            _field("trace_id", 1, _F.TYPE_STRING),
            _field("start_time", 2, _F.TYPE_MESSAGE, type_name=timestamp),
            _field("end_time", 3, _F.TYPE_MESSAGE, type_name=timestamp),
            _field("raw_traces", 4, _F.TYPE_BOOL),
        ),
        _message(
            "TraceQueryParameters",
            _field("service_name", 1, _F.TYPE_STRING),
            _field("operation_name", 2, _F.TYPE_STRING),
            _field(
                "attributes",
                3,
                _F.TYPE_MESSAGE,
                type_name=f".{PACKAGE}.TraceQueryParameters.AttributesEntry",
                repeated=True,
            ),
            _field("start_time_min", 4, _F.TYPE_MESSAGE, type_name=timestamp),
            _field("start_time_max", 5, _F.TYPE_MESSAGE, type_name=timestamp),
            _field("duration_min", 6, _F.TYPE_MESSAGE, type_name=duration),
            _field("duration_max", 7, _F.TYPE_MESSAGE, type_name=duration),
            _field("search_depth", 8, _F.TYPE_INT32),
            _field("raw_traces", 9, _F.TYPE_BOOL),
            nested=(attributes_entry,),
        ),
        _message(
            "FindTracesRequest",
            _field(
                "query", 1, _F.TYPE_MESSAGE, type_name=f".{PACKAGE}.TraceQueryParameters"
            ),
        ),
        _message("GetServicesRequest"),
        _message(
            "GetServicesResponse",
            _field("services", 1, _F.TYPE_STRING, repeated=True),
        ),
        _message(
            "GetOperationsRequest",
            _field("service", 1, _F.TYPE_STRING),
            _field("span_kind", 2, _F.TYPE_STRING),
        ),
        _message(
            "Operation",
            _field("name", 1, _F.TYPE_STRING),
            _field("span_kind", 2, _F.TYPE_STRING),
        ),
        _message(
            "GetOperationsResponse",
            _field(
                "operations",
                1,
                _F.TYPE_MESSAGE,
                type_name=f".{PACKAGE}.Operation",
                repeated=True,
            ),
        ),
    ]

    return descriptor_pb2.FileDescriptorProto(
        name=FILE_NAME,
        package=PACKAGE,
        syntax="proto3",
        dependency=[
            timestamp_pb2.DESCRIPTOR.name,
            duration_pb2.DESCRIPTOR.name,
            trace_pb2.DESCRIPTOR.name,
        ],
        message_type=messages,
    )


def _load_file() -> Any:
    pool = descriptor_pool.Default()
    try:
        return pool.FindFileByName(FILE_NAME)
    except KeyError:
        pool.AddSerializedFile(_build_file().SerializeToString())
        return pool.FindFileByName(FILE_NAME)


DESCRIPTOR = _load_file()


def _message_class(name: str) -> Any:
    return message_factory.GetMessageClass(DESCRIPTOR.message_types_by_name[name])


GetTraceRequest = _message_class("GetTraceRequest")
TraceQueryParameters = _message_class("TraceQueryParameters")
FindTracesRequest = _message_class("FindTracesRequest")
GetServicesRequest = _message_class("GetServicesRequest")
GetServicesResponse = _message_class("GetServicesResponse")
GetOperationsRequest = _message_class("GetOperationsRequest")
Operation = _message_class("Operation")
GetOperationsResponse = _message_class("GetOperationsResponse")

TracesData = trace_pb2.TracesData

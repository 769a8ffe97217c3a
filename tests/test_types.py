"""Tests for _types module."""

from __future__ import annotations

import pytest

from jaeger_query._types import (
    Attribute,
    AttributeValue,
    GetServicesResponse,
    GetTraceResponse,
    InstrumentationScope,
    Resource,
    ResourceSpans,
    ScopeSpans,
    Span,
    SpanKind,
    Status,
    StatusCode,
    as_json,
    span_kind_to_number,
    status_code_to_number,
    to_span_kind,
    to_status_code,
)


def test_span_kind_values() -> None:
    assert [k.value for k in SpanKind] == [
        "unspecified",
        "internal",
        "server",
        "client",
        "producer",
        "consumer",
    ]


def test_status_code_values() -> None:
    assert [c.value for c in StatusCode] == ["unset", "ok", "error"]


class TestSpanKindMapping:
    @pytest.mark.parametrize("kind", list(SpanKind))
    def test_round_trip_through_number(self, kind: SpanKind) -> None:
        assert to_span_kind(span_kind_to_number(kind)) is kind

    @pytest.mark.parametrize("kind", list(SpanKind))
    def test_round_trip_through_name(self, kind: SpanKind) -> None:
        assert to_span_kind(kind.value) is kind

    def test_wire_numbers(self) -> None:
        assert span_kind_to_number(SpanKind.UNSPECIFIED) == 0
        assert span_kind_to_number(SpanKind.INTERNAL) == 1
        assert span_kind_to_number(SpanKind.SERVER) == 2
        assert span_kind_to_number(SpanKind.CLIENT) == 3
        assert span_kind_to_number(SpanKind.PRODUCER) == 4
        assert span_kind_to_number(SpanKind.CONSUMER) == 5

    def test_zero_is_unspecified(self) -> None:
        assert to_span_kind(0) is SpanKind.UNSPECIFIED

    def test_case_insensitive(self) -> None:
        assert to_span_kind("SERVER") is SpanKind.SERVER
        assert to_span_kind("Client") is SpanKind.CLIENT

    def test_protobuf_enum_name(self) -> None:
        assert to_span_kind("SPAN_KIND_PRODUCER") is SpanKind.PRODUCER

    def test_numeric_string(self) -> None:
        assert to_span_kind("2") is SpanKind.SERVER

    def test_unknown_values(self) -> None:
        assert to_span_kind(None) is None
        assert to_span_kind("") is None
        assert to_span_kind("sideways") is None
        assert to_span_kind(42) is None
        assert to_span_kind(True) is None  # type: ignore[arg-type]


class TestStatusCodeMapping:
    @pytest.mark.parametrize("code", list(StatusCode))
    def test_round_trip_through_number(self, code: StatusCode) -> None:
        assert to_status_code(status_code_to_number(code)) is code

    def test_wire_numbers(self) -> None:
        assert status_code_to_number(StatusCode.UNSET) == 0
        assert status_code_to_number(StatusCode.OK) == 1
        assert status_code_to_number(StatusCode.ERROR) == 2

    def test_protobuf_enum_name(self) -> None:
        assert to_status_code("STATUS_CODE_ERROR") is StatusCode.ERROR

    def test_unknown_values(self) -> None:
        assert to_status_code(None) is None
        assert to_status_code(7) is None
        assert to_status_code("broken") is None


class TestAttributeValue:
    def test_of_string(self) -> None:
        assert AttributeValue.of("v") == AttributeValue(string_value="v")

    def test_of_int(self) -> None:
        assert AttributeValue.of(42) == AttributeValue(int_value=42)

    def test_of_float(self) -> None:
        assert AttributeValue.of(3.14) == AttributeValue(double_value=3.14)

    def test_bool_is_not_int(self) -> None:
        """bool is a subclass of int; it must stay a bool."""
        v = AttributeValue.of(True)
        assert v.bool_value is True
        assert v.int_value is None

    def test_value_property(self) -> None:
        assert AttributeValue(bool_value=False).value is False
        assert AttributeValue(int_value=0).value == 0
        assert AttributeValue().value is None


class TestAsJson:
    def test_absent_fields_are_omitted(self) -> None:
        attr = Attribute(key="http.status_code", value=AttributeValue(int_value=200))
        assert as_json(attr) == {"key": "http.status_code", "value": {"intValue": 200}}

    def test_span_shape(self) -> None:
        span = Span(
            trace_id="0" * 31 + "1",
            span_id="00000000000000ff",
            name="GET /",
            kind=SpanKind.SERVER,
            start_time_unix_nano="1700000000000000000",
            status=Status(code=StatusCode.ERROR, message="boom"),
        )
        assert as_json(span) == {
            "traceId": "0" * 31 + "1",
            "spanId": "00000000000000ff",
            "parentSpanId": "",
            "name": "GET /",
            "kind": "server",
            "startTimeUnixNano": "1700000000000000000",
            "status": {"code": "error", "message": "boom"},
        }

    def test_nested_resource_spans(self) -> None:
        rs = ResourceSpans(
            resource=Resource(
                attributes=(Attribute("service.name", AttributeValue.of("api")),)
            ),
            scope_spans=(
                ScopeSpans(scope=InstrumentationScope(name="lib"), spans=(Span(),)),
            ),
        )
        data = as_json(rs)
        assert data["resource"]["attributes"][0]["value"] == {"stringValue": "api"}
        assert data["scopeSpans"][0]["scope"] == {"name": "lib"}
        assert data["scopeSpans"][0]["spans"][0]["kind"] == "unspecified"

    def test_empty_responses(self) -> None:
        assert as_json(GetServicesResponse()) == {}
        assert as_json(GetTraceResponse()) == {}


def test_entities_are_frozen() -> None:
    span = Span(name="a")
    with pytest.raises(AttributeError):
        span.name = "b"  # type: ignore[misc]

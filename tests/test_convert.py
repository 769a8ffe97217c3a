"""Tests for _convert module."""

from __future__ import annotations

import base64

import pytest

from jaeger_query._convert import (
    id_to_hex,
    ms_to_duration_param,
    ms_to_rfc3339,
    ms_to_seconds_nanos,
    nanos_to_str,
    normalize_json_id,
    seconds_nanos_to_ms,
    validate_trace_id,
)


class TestSecondsNanos:
    def test_split(self) -> None:
        assert ms_to_seconds_nanos(1_700_000_000_123) == (1_700_000_000, 123_000_000)

    def test_whole_seconds(self) -> None:
        assert ms_to_seconds_nanos(5000) == (5, 0)

    @pytest.mark.parametrize("ms", [0, 1, 999, 1000, 1_700_000_000_001, 86_400_000])
    def test_round_trip(self, ms: int) -> None:
        assert seconds_nanos_to_ms(*ms_to_seconds_nanos(ms)) == ms

    def test_sub_millisecond_nanos_truncated(self) -> None:
        assert seconds_nanos_to_ms(1, 999_999) == 1000


class TestQueryFormatting:
    def test_rfc3339(self) -> None:
        assert ms_to_rfc3339(0) == "1970-01-01T00:00:00.000Z"
        assert ms_to_rfc3339(1_704_067_200_123) == "2024-01-01T00:00:00.123Z"

    def test_duration_param(self) -> None:
        assert ms_to_duration_param(250) == "250ms"


class TestIds:
    def test_hex_is_lowercase(self) -> None:
        assert id_to_hex(bytes.fromhex("ABCDEF0123456789")) == "abcdef0123456789"

    def test_empty_id(self) -> None:
        assert id_to_hex(b"") == ""

    def test_zero_padded(self) -> None:
        assert id_to_hex(b"\x00" * 15 + b"\x01") == "0" * 31 + "1"

    def test_json_hex_lowercased(self) -> None:
        assert normalize_json_id("ABCDEF0123456789") == "abcdef0123456789"

    def test_json_base64_decoded(self) -> None:
        raw = bytes.fromhex("0123456789abcdef0123456789abcdef")
        encoded = base64.b64encode(raw).decode()
        assert normalize_json_id(encoded) == "0123456789abcdef0123456789abcdef"

    def test_json_missing_id(self) -> None:
        assert normalize_json_id(None) == ""
        assert normalize_json_id("") == ""


class TestNanos:
    def test_int(self) -> None:
        assert nanos_to_str(1_700_000_000_000_000_001) == "1700000000000000001"

    def test_string(self) -> None:
        assert nanos_to_str("1000000000") == "1000000000"

    def test_zero_and_missing_are_absent(self) -> None:
        assert nanos_to_str(0) is None
        assert nanos_to_str("0") is None
        assert nanos_to_str(None) is None


class TestValidateTraceId:
    def test_valid(self) -> None:
        validate_trace_id("014c2d3d2f2bc95b145834e7c6063744")
        validate_trace_id("014C2D3D2F2BC95B145834E7C6063744")

    @pytest.mark.parametrize("bad", ["", "abc", "z" * 32, "0" * 33])
    def test_invalid(self, bad: str) -> None:
        with pytest.raises(ValueError, match="32 hexadecimal characters"):
            validate_trace_id(bad)

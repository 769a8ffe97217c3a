"""Tests for _config module."""

from __future__ import annotations

import pytest

from jaeger_query._config import (
    DEFAULT_REQUEST_TIMEOUT_MS,
    MAX_REQUEST_TIMEOUT_MS,
    ClientConfig,
    Protocol,
)
from jaeger_query._errors import ConfigurationError


def test_config_defaults() -> None:
    cfg = ClientConfig(url="http://localhost")
    assert cfg.url == "http://localhost"
    assert cfg.port is None
    assert cfg.authorization_header is None
    assert cfg.request_timeout_ms == DEFAULT_REQUEST_TIMEOUT_MS == 60_000
    assert cfg.protocol is Protocol.GRPC
    assert cfg.debug is False


def test_config_custom_values() -> None:
    cfg = ClientConfig(
        url="jaeger.example.com",
        port=443,
        authorization_header="Bearer t0k3n",
        request_timeout_ms=5_000,
        protocol=Protocol.HTTP,
        debug=True,
    )
    assert cfg.port == 443
    assert cfg.authorization_header == "Bearer t0k3n"
    assert cfg.request_timeout_ms == 5_000
    assert cfg.request_timeout_s == 5.0
    assert cfg.protocol is Protocol.HTTP
    assert cfg.debug is True


def test_config_is_frozen() -> None:
    cfg = ClientConfig(url="http://localhost")
    with pytest.raises(AttributeError):
        cfg.url = "changed"  # type: ignore[misc]


class TestValidation:
    def test_empty_url(self) -> None:
        with pytest.raises(ConfigurationError, match="No Jaeger URL"):
            ClientConfig(url="  ")

    @pytest.mark.parametrize("timeout_ms", [0, -1])
    def test_non_positive_timeout(self, timeout_ms: int) -> None:
        with pytest.raises(ConfigurationError, match="must be positive"):
            ClientConfig(url="localhost", request_timeout_ms=timeout_ms)

    def test_timeout_above_max(self) -> None:
        with pytest.raises(ConfigurationError, match="at most 300000"):
            ClientConfig(url="localhost", request_timeout_ms=MAX_REQUEST_TIMEOUT_MS + 1)

    def test_timeout_at_max(self) -> None:
        cfg = ClientConfig(url="localhost", request_timeout_ms=MAX_REQUEST_TIMEOUT_MS)
        assert cfg.request_timeout_ms == 300_000

    @pytest.mark.parametrize("port", [0, 70_000])
    def test_port_out_of_range(self, port: int) -> None:
        with pytest.raises(ConfigurationError, match="Invalid Jaeger port"):
            ClientConfig(url="localhost", port=port)

    def test_unknown_protocol(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid Jaeger protocol: SOAP"):
            ClientConfig(url="localhost", protocol="SOAP")  # type: ignore[arg-type]


class TestProtocolParse:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("grpc", Protocol.GRPC),
            ("GRPC", Protocol.GRPC),
            ("streaming", Protocol.GRPC),
            ("http", Protocol.HTTP),
            ("HTTP", Protocol.HTTP),
            ("rest", Protocol.HTTP),
        ],
    )
    def test_names_and_aliases(self, raw: str, expected: Protocol) -> None:
        assert Protocol.parse(raw) is expected

    def test_string_protocol_normalized_on_config(self) -> None:
        cfg = ClientConfig(url="localhost", protocol="rest")  # type: ignore[arg-type]
        assert cfg.protocol is Protocol.HTTP


class TestFromEnv:
    def test_minimal(self) -> None:
        cfg = ClientConfig.from_env({"JAEGER_URL": "http://localhost:16686"})
        assert cfg.url == "http://localhost:16686"
        assert cfg.protocol is Protocol.GRPC
        assert cfg.request_timeout_ms == DEFAULT_REQUEST_TIMEOUT_MS

    def test_all_variables(self) -> None:
        cfg = ClientConfig.from_env(
            {
                "JAEGER_URL": "jaeger.example.com",
                "JAEGER_PORT": "443",
                "JAEGER_AUTHORIZATION_HEADER": "Basic abc",
                "JAEGER_REQUEST_TIMEOUT_MS": "15000",
                "JAEGER_PROTOCOL": "HTTP",
                "JAEGER_DEBUG": "1",
            }
        )
        assert cfg.port == 443
        assert cfg.authorization_header == "Basic abc"
        assert cfg.request_timeout_ms == 15_000
        assert cfg.protocol is Protocol.HTTP
        assert cfg.debug is True

    def test_missing_url(self) -> None:
        with pytest.raises(ConfigurationError, match="JAEGER_URL"):
            ClientConfig.from_env({})

    def test_non_numeric_timeout(self) -> None:
        with pytest.raises(ConfigurationError, match="JAEGER_REQUEST_TIMEOUT_MS"):
            ClientConfig.from_env(
                {"JAEGER_URL": "localhost", "JAEGER_REQUEST_TIMEOUT_MS": "soon"}
            )

    def test_bad_protocol(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid Jaeger protocol"):
            ClientConfig.from_env({"JAEGER_URL": "localhost", "JAEGER_PROTOCOL": "udp"})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JAEGER_URL", "http://env-host")
        for name in ("JAEGER_PORT", "JAEGER_PROTOCOL", "JAEGER_REQUEST_TIMEOUT_MS"):
            monkeypatch.delenv(name, raising=False)
        assert ClientConfig.from_env().url == "http://env-host"

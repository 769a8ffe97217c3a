"""Client interface and protocol selection."""

from __future__ import annotations

import logging
from typing import Protocol as _Interface
from typing import runtime_checkable

from jaeger_query._config import ClientConfig, Protocol
from jaeger_query._grpc_client import GrpcJaegerClient
from jaeger_query._http_client import HttpJaegerClient
from jaeger_query._types import (
    FindTracesRequest,
    FindTracesResponse,
    GetOperationsRequest,
    GetOperationsResponse,
    GetServicesRequest,
    GetServicesResponse,
    GetTraceRequest,
    GetTraceResponse,
)

logger = logging.getLogger("jaeger_query.client")


@runtime_checkable
class JaegerClient(_Interface):
    """The four query operations, independent of the wire protocol.

    Each call either returns a canonical response (empty when the backend
    lacks the operation or the entity) or raises
    :class:`~jaeger_query.RequestTimeoutError` /
    :class:`~jaeger_query.TransportError`.
    """

    async def get_services(
        self, request: GetServicesRequest
    ) -> GetServicesResponse: ...

    async def get_operations(
        self, request: GetOperationsRequest
    ) -> GetOperationsResponse: ...

    async def get_trace(self, request: GetTraceRequest) -> GetTraceResponse: ...

    async def find_traces(self, request: FindTracesRequest) -> FindTracesResponse: ...

    async def close(self) -> None: ...

    async def __aenter__(self) -> JaegerClient: ...

    async def __aexit__(self, *exc_info: object) -> None: ...


def create_client(config: ClientConfig) -> JaegerClient:
    """Build the client for ``config.protocol`` (gRPC unless configured otherwise)."""
    if config.protocol is Protocol.HTTP:
        client: JaegerClient = HttpJaegerClient(config)
    else:
        client = GrpcJaegerClient(config)
    logger.debug("Using %s protocol for %s", config.protocol.value, config.url)
    return client

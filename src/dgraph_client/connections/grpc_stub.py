"""gRPC channel backed stub."""

import logging
from abc import ABC, abstractmethod
from functools import partial
from typing import Any

import grpc

from dgraph_client.connections.base import DgraphStub
from dgraph_client.models.types import (
    CallOptions,
    Check,
    DgraphResponse,
    Jwt,
    LoginRequest,
    Operation,
    Request,
    TxnContext,
    Version,
)

logger = logging.getLogger(__name__)

METHODS = {
    "query": "/api.Dgraph/Query",
    "commit_or_abort": "/api.Dgraph/CommitOrAbort",
    "alter": "/api.Dgraph/Alter",
    "check_version": "/api.Dgraph/CheckVersion",
    "login": "/api.Dgraph/Login",
}


class MessageCodec(ABC):
    """Converts client dataclasses to and from protocol bytes."""

    @abstractmethod
    def encode(self, message: Any) -> bytes:
        """Serialize a request message."""

    @abstractmethod
    def decode(self, method: str, data: bytes) -> Any:
        """Deserialize the response of ``method`` (a key of ``METHODS``)."""


class GrpcDgraphStub(DgraphStub):
    """DgraphStub talking to one alpha over a ``grpc.aio`` channel."""

    def __init__(self, channel: grpc.aio.Channel, codec: MessageCodec):
        """Initialize the stub.

        Args:
            channel: Open channel to the alpha
            codec: Protocol message codec
        """
        self._channel = channel
        self._calls = {
            name: channel.unary_unary(
                path,
                request_serializer=codec.encode,
                response_deserializer=partial(codec.decode, name),
            )
            for name, path in METHODS.items()
        }

    @classmethod
    def insecure(cls, target: str, codec: MessageCodec) -> "GrpcDgraphStub":
        logger.info("Opening insecure channel to %s", target)
        return cls(grpc.aio.insecure_channel(target), codec)

    @classmethod
    def secure(
        cls, target: str, credentials: grpc.ChannelCredentials, codec: MessageCodec
    ) -> "GrpcDgraphStub":
        logger.info("Opening secure channel to %s", target)
        return cls(grpc.aio.secure_channel(target, credentials), codec)

    async def query(self, request: Request, options: CallOptions) -> DgraphResponse:
        return await self._calls["query"](request, **options.to_kwargs())

    async def commit_or_abort(self, context: TxnContext, options: CallOptions) -> TxnContext | None:
        return await self._calls["commit_or_abort"](context, **options.to_kwargs())

    async def alter(self, operation: Operation, options: CallOptions) -> None:
        await self._calls["alter"](operation, **options.to_kwargs())

    async def check_version(self, options: CallOptions) -> Version:
        return await self._calls["check_version"](Check(), **options.to_kwargs())

    async def login(self, request: LoginRequest, options: CallOptions) -> Jwt:
        return await self._calls["login"](request, **options.to_kwargs())

    async def close(self) -> None:
        await self._channel.close()

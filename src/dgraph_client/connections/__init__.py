"""Connection management modules."""

from dgraph_client.connections.base import DgraphStub
from dgraph_client.connections.grpc_stub import GrpcDgraphStub, MessageCodec

__all__ = ["DgraphStub", "GrpcDgraphStub", "MessageCodec"]

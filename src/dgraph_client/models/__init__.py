"""Data models for dgraph_client."""

from dgraph_client.models.result import Result
from dgraph_client.models.types import (
    CallOptions,
    DgraphResponse,
    Jwt,
    LoginRequest,
    Mutation,
    Operation,
    Request,
    Response,
    TransactionState,
    TxnContext,
    Version,
)

__all__ = [
    "CallOptions",
    "DgraphResponse",
    "Jwt",
    "LoginRequest",
    "Mutation",
    "Operation",
    "Request",
    "Response",
    "Result",
    "TransactionState",
    "TxnContext",
    "Version",
]

"""Transaction coordinating client for Dgraph"""

from dgraph_client.client import DgraphClient
from dgraph_client.config import ClientConfig
from dgraph_client.connections import DgraphStub
from dgraph_client.exceptions import (
    AlreadyDisposedError,
    ConfigurationError,
    DgraphClientError,
    ExceptionalError,
    OperationTimeoutError,
    ServiceUnavailableError,
    StartTsMismatchError,
    TransactionAbortedError,
    TransactionError,
    TransactionNotOKError,
    TransportError,
)
from dgraph_client.models import (
    CallOptions,
    Mutation,
    Operation,
    Request,
    Response,
    Result,
    TransactionState,
    TxnContext,
)
from dgraph_client.transactions import Query, Transaction

__version__ = "0.1.0"

__all__ = [
    "AlreadyDisposedError",
    "CallOptions",
    "ClientConfig",
    "ConfigurationError",
    "DgraphClient",
    "DgraphClientError",
    "DgraphStub",
    "ExceptionalError",
    "Mutation",
    "Operation",
    "OperationTimeoutError",
    "Query",
    "Request",
    "Response",
    "Result",
    "ServiceUnavailableError",
    "StartTsMismatchError",
    "Transaction",
    "TransactionAbortedError",
    "TransactionError",
    "TransactionNotOKError",
    "TransactionState",
    "TransportError",
    "TxnContext",
]

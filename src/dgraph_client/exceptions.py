"""Custom exceptions for dgraph_client.

Most of these are not raised by the client itself: they are returned inside
``Result`` values so callers can inspect them. ``AlreadyDisposedError`` is always
raised since it signals a programming error.
"""

import grpc


class DgraphClientError(Exception):
    """Base exception for all dgraph_client exceptions."""


class ConfigurationError(DgraphClientError):
    """Raised when configuration is invalid."""


class AlreadyDisposedError(DgraphClientError):
    """Raised when a disposed client or transaction is used."""

    def __init__(self, name: str):
        super().__init__(f"{name} has already been disposed")
        self.name = name


class ExceptionalError(DgraphClientError):
    """Wraps an unexpected exception raised while running a query."""

    def __init__(self, last_error: Exception):
        super().__init__(f"Query raised {type(last_error).__name__}: {last_error}")
        self.last_error = last_error


class TransactionError(DgraphClientError):
    """Base class for transaction state errors."""


class TransactionNotOKError(TransactionError):
    """Operation attempted on a transaction that is no longer OK."""

    def __init__(self, state):
        super().__init__(f"Transaction is not OK (state: {state.value})")
        self.state = state


class StartTsMismatchError(TransactionError):
    """The server returned a context for a different start timestamp."""

    def __init__(self, local_ts: int, incoming_ts: int):
        super().__init__(
            f"StartTs mismatch: transaction has {local_ts}, server returned {incoming_ts}"
        )
        self.local_ts = local_ts
        self.incoming_ts = incoming_ts


class TransportError(DgraphClientError):
    """Raised when an RPC fails at the transport level."""

    def __init__(self, message: str, last_error: Exception | None = None):
        super().__init__(message)
        self.last_error = last_error

    @property
    def code(self) -> grpc.StatusCode | None:
        """gRPC status code of the underlying error, if any."""
        if isinstance(self.last_error, grpc.RpcError) and hasattr(self.last_error, "code"):
            return self.last_error.code()
        return None

    @property
    def details(self) -> str | None:
        """Server supplied error details, if any."""
        if isinstance(self.last_error, grpc.RpcError) and hasattr(self.last_error, "details"):
            return self.last_error.details()
        return None

    @classmethod
    def from_rpc_error(cls, error: grpc.RpcError) -> "TransportError":
        """Map a gRPC error onto the most specific transport error."""
        code = error.code() if hasattr(error, "code") else None
        details = error.details() if hasattr(error, "details") else None
        error_type = _STATUS_ERRORS.get(code, cls)
        name = code.name if code is not None else "UNKNOWN"
        message = f"RPC failed with {name}"
        if details:
            message = f"{message}: {details}"
        return error_type(message, error)


class TransactionAbortedError(TransportError):
    """The server aborted the transaction, usually a commit conflict."""


class OperationTimeoutError(TransportError):
    """Raised when an RPC exceeds its deadline."""


class ServiceUnavailableError(TransportError):
    """Raised when the server cannot be reached."""


_STATUS_ERRORS: dict[grpc.StatusCode, type[TransportError]] = {
    grpc.StatusCode.ABORTED: TransactionAbortedError,
    grpc.StatusCode.DEADLINE_EXCEEDED: OperationTimeoutError,
    grpc.StatusCode.UNAVAILABLE: ServiceUnavailableError,
}

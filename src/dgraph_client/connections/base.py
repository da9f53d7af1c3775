"""Base stub class for Dgraph RPC endpoints."""

from abc import ABC, abstractmethod

from dgraph_client.models.types import (
    CallOptions,
    DgraphResponse,
    Jwt,
    LoginRequest,
    Operation,
    Request,
    TxnContext,
    Version,
)


class DgraphStub(ABC):
    """Abstract RPC endpoint of one Dgraph alpha.

    Implementations wrap a transport channel and raise ``grpc.RpcError`` on
    transport failures. Everything else they raise is treated as a bug and
    propagates.
    """

    @abstractmethod
    async def query(self, request: Request, options: CallOptions) -> DgraphResponse:
        """Run a query and/or mutations."""

    @abstractmethod
    async def commit_or_abort(self, context: TxnContext, options: CallOptions) -> TxnContext | None:
        """Commit the transaction, or abort it when ``context.aborted`` is set."""

    @abstractmethod
    async def alter(self, operation: Operation, options: CallOptions) -> None:
        """Alter the schema or drop data."""

    @abstractmethod
    async def check_version(self, options: CallOptions) -> Version:
        """Return the server version."""

    @abstractmethod
    async def login(self, request: LoginRequest, options: CallOptions) -> Jwt:
        """Log in and return the issued tokens."""

    async def close(self) -> None:
        """Release the underlying channel."""

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

"""Round-robin dispatch of RPC work over a fixed pool of stubs."""

import itertools
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import grpc

from dgraph_client.connections.base import DgraphStub
from dgraph_client.exceptions import AlreadyDisposedError, ConfigurationError, TransportError
from dgraph_client.models.result import Result

logger = logging.getLogger(__name__)

T = TypeVar("T")


def transport_failure(error: grpc.RpcError) -> Result:
    """Failed result wrapping a transport error."""
    return Result.fail(TransportError.from_rpc_error(error))


class Dispatcher:
    """Executes units of work against the next stub in the pool."""

    def __init__(self, stubs: Sequence[DgraphStub]):
        """Initialize the dispatcher.

        Args:
            stubs: RPC stubs to rotate over, fixed for the dispatcher's lifetime
        """
        if not stubs:
            raise ConfigurationError("at least one stub is required")
        self._stubs = tuple(stubs)
        self._counter = itertools.count()
        self._disposed = False

    @property
    def stubs(self) -> tuple[DgraphStub, ...]:
        return self._stubs

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        self._disposed = True

    def next_index(self) -> int:
        """Index of the stub to use for the next call."""
        return next(self._counter) % len(self._stubs)

    async def execute(
        self,
        work: Callable[[DgraphStub], Awaitable[T]],
        on_transport_failure: Callable[[grpc.RpcError], T],
    ) -> T:
        """Run ``work`` against the next stub.

        Args:
            work: Coroutine function taking the selected stub
            on_transport_failure: Builds the return value from a transport error

        Returns:
            Whatever ``work`` or ``on_transport_failure`` returned

        Raises:
            AlreadyDisposedError: If the dispatcher has been disposed
        """
        if self._disposed:
            raise AlreadyDisposedError("DgraphClient")

        index = self.next_index()
        logger.debug("Dispatching RPC to stub %d of %d", index, len(self._stubs))
        try:
            return await work(self._stubs[index])
        except grpc.RpcError as e:
            logger.debug("RPC on stub %d failed: %s", index, e)
            return on_transport_failure(e)

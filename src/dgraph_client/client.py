"""Client facade for dgraph_client."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any, TypeVar

import grpc

from dgraph_client.config import ClientConfig
from dgraph_client.connections.base import DgraphStub
from dgraph_client.dispatcher import Dispatcher, transport_failure
from dgraph_client.exceptions import AlreadyDisposedError
from dgraph_client.models.result import Result
from dgraph_client.models.types import CallOptions, Jwt, LoginRequest, Operation
from dgraph_client.transactions import Query, Transaction

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DgraphClient:
    """Entry point for transactions and administrative calls."""

    def __init__(self, stubs: list[DgraphStub], config: ClientConfig | None = None):
        """Initialize DgraphClient.

        Args:
            stubs: RPC stubs, one per alpha endpoint
            config: Client configuration (uses defaults if None)
        """
        self.config = config or ClientConfig()
        self._dispatcher = Dispatcher(stubs)
        self._background_tasks: set[asyncio.Task] = set()
        self.jwt: Jwt | None = None
        self._closing = False

    @classmethod
    def create(cls, *stubs: DgraphStub, config: ClientConfig | None = None) -> "DgraphClient":
        return cls(list(stubs), config)

    @property
    def is_disposed(self) -> bool:
        return self._closing or self._dispatcher.is_disposed

    def new_transaction(self) -> Transaction:
        """Start a read-write transaction."""
        self._assert_not_disposed()
        return Transaction(self)

    def new_read_only_transaction(self, best_effort: bool = False) -> Query:
        """Start a read-only query handle."""
        self._assert_not_disposed()
        return Query(self, best_effort=best_effort)

    async def dgraph_execute(
        self,
        work: Callable[[DgraphStub], Awaitable[T]],
        on_transport_failure: Callable[[grpc.RpcError], T],
    ) -> T:
        """Run ``work`` against the next stub, see ``Dispatcher.execute``."""
        return await self._dispatcher.execute(work, on_transport_failure)

    def resolve_options(self, options: CallOptions | None) -> CallOptions:
        """Apply configured defaults and login credentials to per-call options."""
        if options is None:
            options = CallOptions()
        if options.timeout is None and self.config.default_timeout_seconds is not None:
            options = replace(options, timeout=self.config.default_timeout_seconds)
        if self.jwt is not None:
            options = options.with_metadata("accessJwt", self.jwt.access_jwt)
        return options

    async def alter(self, operation: Operation, options: CallOptions | None = None) -> Result[None]:
        """Alter the schema or drop data."""
        call_options = self.resolve_options(options)

        async def run(stub: DgraphStub) -> Result[None]:
            await stub.alter(operation, call_options)
            return Result.ok()

        return await self.dgraph_execute(run, transport_failure)

    async def check_version(self, options: CallOptions | None = None) -> Result[str]:
        """Return the server version tag."""
        call_options = self.resolve_options(options)

        async def run(stub: DgraphStub) -> Result[str]:
            version = await stub.check_version(call_options)
            return Result.ok(version.tag)

        return await self.dgraph_execute(run, transport_failure)

    async def login_into_namespace(
        self,
        user: str | None = None,
        password: str | None = None,
        namespace: int | None = None,
        options: CallOptions | None = None
    ) -> Result[None]:
        """Log in, falling back to the configured credentials."""
        request = LoginRequest(
            userid=user if user is not None else self.config.user,
            password=password if password is not None else self.config.password,
            namespace=namespace if namespace is not None else self.config.namespace,
        )
        call_options = self.resolve_options(options)

        async def run(stub: DgraphStub) -> Result[None]:
            self.jwt = await stub.login(request, call_options)
            logger.info("Logged in as %s (namespace %d)", request.userid, request.namespace)
            return Result.ok()

        return await self.dgraph_execute(run, transport_failure)

    def run_in_background(self, func: Callable[[], Awaitable[Any]]) -> asyncio.Task | None:
        """Schedule ``func()`` without waiting for it.

        Returns None, and does not call ``func``, when no event loop is running.
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, background call skipped")
            return None

        task = loop.create_task(func())
        self._background_tasks.add(task)
        task.add_done_callback(self._on_background_done)
        return task

    def _on_background_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Background call raised: %s", error)
            return
        result = task.result()
        if isinstance(result, Result) and result.is_failed:
            logger.debug("Background call failed: %s", result.error)

    async def close(self) -> None:
        """Wait for pending background discards and close all stubs."""
        if self.is_disposed:
            return

        # Set before the first await so concurrent callers see a disposed client
        self._closing = True
        logger.info("Closing DgraphClient")

        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

        self._dispatcher.dispose()

        await asyncio.gather(
            *(stub.close() for stub in self._dispatcher.stubs),
            return_exceptions=True
        )
        logger.info("DgraphClient closed")

    def _assert_not_disposed(self) -> None:
        if self.is_disposed:
            raise AlreadyDisposedError(type(self).__name__)

    async def __aenter__(self):
        """Async context manager entry."""
        self._assert_not_disposed()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

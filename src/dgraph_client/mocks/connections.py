"""Mock stub implementation backed by the in-memory data store.

Transport failures are simulated with real ``grpc.aio.AioRpcError`` objects
so the client's error mapping is exercised end to end.
"""

import asyncio
import hashlib
import json
import time
from typing import Any

import grpc
from grpc.aio import AioRpcError, Metadata

from dgraph_client.connections.base import DgraphStub
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

from .data_store import InMemoryDgraphStore, TransactionConflict

MOCK_VERSION = "v24.0.0-mock"


def rpc_error(code: grpc.StatusCode, details: str = "") -> AioRpcError:
    """Build the error a grpc.aio stub would raise."""
    return AioRpcError(code, Metadata(), Metadata(), details=details)


def context_hash(start_ts: int) -> str:
    return hashlib.sha256(str(start_ts).encode()).hexdigest()[:16]


class MockDgraphStub(DgraphStub):
    """Mock implementation of a Dgraph alpha stub."""

    def __init__(
        self,
        store: InMemoryDgraphStore | None = None,
        name: str = "alpha",
        latency_ms: float = 0
    ):
        """Initialize mock stub.

        Args:
            store: Shared data store (a private one is created if None)
            name: Name used in call records
            latency_ms: Simulated latency per call
        """
        self.store = store if store is not None else InMemoryDgraphStore()
        self.name = name
        self.closed = False
        self.calls: list[tuple[str, Any, CallOptions]] = []
        self._latency_ms = latency_ms
        self._failures: dict[str, list[AioRpcError]] = {}

    def fail_next(
        self,
        method: str,
        code: grpc.StatusCode = grpc.StatusCode.UNAVAILABLE,
        details: str = "mock failure"
    ) -> None:
        """Make the next call to ``method`` raise a transport error."""
        self._failures.setdefault(method, []).append(rpc_error(code, details))

    def calls_to(self, method: str) -> list[tuple[str, Any, CallOptions]]:
        return [call for call in self.calls if call[0] == method]

    async def query(self, request: Request, options: CallOptions) -> DgraphResponse:
        await self._enter("query", request, options)
        started = time.perf_counter_ns()
        self.store.query_count += 1

        start_ts = request.start_ts
        if not start_ts:
            if request.read_only and request.best_effort and self.store.max_ts:
                start_ts = self.store.max_ts
            else:
                start_ts = self.store.next_timestamp()

        uids: dict[str, str] = {}
        keys: set[str] = set()
        preds: set[str] = set()
        for mutation in request.mutations:
            if mutation.set_json:
                new_uids, set_keys, set_preds = self.store.stage_set(start_ts, mutation.set_json)
                uids.update(new_uids)
                keys |= set_keys
                preds |= set_preds
            if mutation.delete_json:
                del_keys, del_preds = self.store.stage_delete(start_ts, mutation.delete_json)
                keys |= del_keys
                preds |= del_preds

        payload: dict[str, Any] = {}
        if request.query.strip():
            payload["q"] = self.store.read(start_ts)

        if request.commit_now and request.mutations:
            self._commit(start_ts)

        return DgraphResponse(
            json=json.dumps(payload).encode(),
            txn=TxnContext(
                start_ts=start_ts,
                hash=context_hash(start_ts),
                keys=keys,
                preds=preds,
            ),
            uids=uids,
            latency={"total_ns": time.perf_counter_ns() - started},
        )

    async def commit_or_abort(self, context: TxnContext, options: CallOptions) -> TxnContext:
        await self._enter("commit_or_abort", context, options)

        if context.aborted:
            self.store.abort(context.start_ts)
            return TxnContext(start_ts=context.start_ts, aborted=True)

        self._commit(context.start_ts)
        return TxnContext(start_ts=context.start_ts, hash=context.hash)

    async def alter(self, operation: Operation, options: CallOptions) -> None:
        await self._enter("alter", operation, options)
        if operation.drop_all:
            self.store.drop_all()
        if operation.schema:
            self.store.schema.append(operation.schema)

    async def check_version(self, options: CallOptions) -> Version:
        await self._enter("check_version", None, options)
        return Version(tag=MOCK_VERSION)

    async def login(self, request: LoginRequest, options: CallOptions) -> Jwt:
        await self._enter("login", request, options)
        if not self.store.check_login(request.userid, request.password, request.namespace):
            raise rpc_error(grpc.StatusCode.UNAUTHENTICATED, "invalid username or password")
        return Jwt(access_jwt=f"access-{request.userid}", refresh_jwt=f"refresh-{request.userid}")

    async def close(self) -> None:
        self.closed = True

    async def _enter(self, method: str, payload: Any, options: CallOptions) -> None:
        """Record the call, simulate latency and injected failures."""
        self.calls.append((method, payload, options))
        if self._latency_ms:
            await asyncio.sleep(self._latency_ms / 1000)
        failures = self._failures.get(method)
        if failures:
            raise failures.pop(0)

    def _commit(self, start_ts: int) -> None:
        try:
            self.store.commit(start_ts)
        except TransactionConflict as e:
            raise rpc_error(
                grpc.StatusCode.ABORTED, "Transaction has been aborted. Please retry"
            ) from e

"""読み書きトランザクションの実装"""

import asyncio
import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from dgraph_client.connections.base import DgraphStub
from dgraph_client.dispatcher import transport_failure
from dgraph_client.exceptions import AlreadyDisposedError, TransactionNotOKError
from dgraph_client.models.result import Result
from dgraph_client.models.types import (
    CallOptions,
    Mutation,
    Request,
    Response,
    TransactionState,
)
from dgraph_client.transactions.base import TransactionBase

if TYPE_CHECKING:
    from dgraph_client.client import DgraphClient

logger = logging.getLogger(__name__)


class Transaction(TransactionBase):
    """読み書きトランザクション

    ``async with`` で使用すると、コミットされずに抜けた場合に
    バックグラウンドで破棄される。
    """

    def __init__(self, client: "DgraphClient"):
        super().__init__(client, read_only=False, best_effort=False)
        self.has_mutated = False
        self._disposed = False
        self._discard_task: asyncio.Task | None = None

    @property
    def pending_discard(self) -> asyncio.Task | None:
        """release() でスケジュールされた破棄タスク"""
        return self._discard_task

    async def do(self, request: Request, options: CallOptions | None = None) -> Result[Response]:
        """クエリとミューテーションを実行

        RPCが失敗した場合はトランザクションを破棄して ERROR 状態にし、
        元のエラーを返す。コンテキストのマージに失敗した場合、結果は
        レスポンスを保持したまま失敗扱いになる。
        """
        self._assert_not_disposed()

        if request.is_empty():
            return Result.ok(Response())

        if self.state != TransactionState.OK:
            return Result.fail(TransactionNotOKError(self.state))

        self.has_mutated = True

        request = replace(
            request,
            start_ts=self.context.start_ts,
            hash=self.context.hash,
            best_effort=self.best_effort,
            read_only=self.read_only,
        )

        result = await self._dispatch_query(request, options)

        if result.is_failed:
            # 元のエラーを返すため、破棄の結果は無視する
            try:
                discarded = await self.discard()
                if discarded.is_failed:
                    logger.debug("Implicit discard failed: %s", discarded.error)
            except Exception as e:
                logger.debug("Implicit discard raised: %s", e)
            finally:
                self.state = TransactionState.ERROR
            return result

        if request.commit_now:
            self.state = TransactionState.COMMITTED
            logger.debug("Transaction %d committed with commit_now", self.context.start_ts)

        merged = self._merge_context(result.value.txn)
        if merged.is_failed:
            return result.with_errors(merged.errors)

        return result

    async def mutate(
        self,
        mutation: Mutation | None = None,
        *,
        query: str = "",
        variables: dict[str, str] | None = None,
        commit_now: bool = False,
        options: CallOptions | None = None
    ) -> Result[Response]:
        """単一のミューテーション (またはアップサート) を実行"""
        request = Request(
            query=query,
            vars=dict(variables or {}),
            mutations=[mutation] if mutation is not None else [],
            commit_now=commit_now,
        )
        return await self.do(request, options)

    async def commit(self, options: CallOptions | None = None) -> Result[None]:
        """トランザクションをコミット"""
        self._assert_not_disposed()

        if self.state != TransactionState.OK:
            return Result.fail(TransactionNotOKError(self.state))

        self.state = TransactionState.COMMITTED

        if not self.has_mutated:
            return Result.ok()

        call_options = self._client.resolve_options(options)

        async def run(stub: DgraphStub) -> Result[None]:
            returned = await stub.commit_or_abort(self._context_snapshot(), call_options)
            return self._merge_context(returned)

        logger.debug("Committing transaction %d", self.context.start_ts)
        return await self._client.dgraph_execute(run, transport_failure)

    async def discard(self, options: CallOptions | None = None) -> Result[None]:
        """トランザクションを破棄 (何度呼んでもよい)"""
        if self.state != TransactionState.OK:
            # COMMITTED は破棄できない
            # ERROR は破棄済み
            # ABORTED への再度の破棄は何もしない
            return Result.ok()

        self.state = TransactionState.ABORTED

        if not self.has_mutated:
            return Result.ok()

        self.context.aborted = True
        call_options = self._client.resolve_options(options)

        async def run(stub: DgraphStub) -> Result[None]:
            await stub.commit_or_abort(self._context_snapshot(), call_options)
            return Result.ok()

        logger.debug("Aborting transaction %d", self.context.start_ts)
        return await self._client.dgraph_execute(run, transport_failure)

    def release(self) -> None:
        """トランザクションを手放す

        OK 状態のままなら破棄をバックグラウンドでスケジュールする。
        何度呼んでもよい。
        """
        if self._disposed or self.state != TransactionState.OK:
            return

        self._disposed = True

        if not self._client.config.discard_on_release:
            logger.debug("Discard on release disabled, leaving transaction to the server")
            return

        self._discard_task = self._client.run_in_background(self.discard)

    def _assert_not_disposed(self) -> None:
        if self._disposed:
            raise AlreadyDisposedError(type(self).__name__)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        self.release()

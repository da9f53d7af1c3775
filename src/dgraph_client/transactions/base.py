"""読み取り専用クエリと読み書きトランザクションの共通実装"""

import logging
from typing import TYPE_CHECKING

from dgraph_client.connections.base import DgraphStub
from dgraph_client.dispatcher import transport_failure
from dgraph_client.exceptions import (
    AlreadyDisposedError,
    ExceptionalError,
    TransactionNotOKError,
)
from dgraph_client.models.result import Result
from dgraph_client.models.types import (
    CallOptions,
    Request,
    Response,
    TransactionState,
    TxnContext,
)
from dgraph_client.transactions.context import merge_context

if TYPE_CHECKING:
    from dgraph_client.client import DgraphClient

logger = logging.getLogger(__name__)


class TransactionBase:
    """クエリハンドルの基底クラス"""

    def __init__(self, client: "DgraphClient", read_only: bool, best_effort: bool):
        self._client = client
        self.read_only = read_only
        self.best_effort = best_effort
        self.state = TransactionState.OK
        self.context = TxnContext()

    async def query(self, query: str, options: CallOptions | None = None) -> Result[Response]:
        """クエリを実行"""
        return await self.query_with_vars(query, None, options)

    async def query_with_vars(
        self,
        query: str,
        variables: dict[str, str] | None,
        options: CallOptions | None = None
    ) -> Result[Response]:
        """変数付きでクエリを実行"""
        self._assert_not_disposed()

        if self.state != TransactionState.OK:
            return Result.fail(TransactionNotOKError(self.state))

        try:
            request = Request(
                query=query,
                vars=dict(variables or {}),
                start_ts=self.context.start_ts,
                hash=self.context.hash,
                read_only=self.read_only,
                best_effort=self.best_effort,
            )
            result = await self._dispatch_query(request, options)
            if result.is_failed:
                return result

            merged = self._merge_context(result.value.txn)
            if merged.is_failed:
                return merged.cast()
            return result
        except AlreadyDisposedError:
            raise
        except Exception as e:
            logger.debug("Query raised %s", e)
            return Result.fail(ExceptionalError(e))

    async def _dispatch_query(
        self, request: Request, options: CallOptions | None
    ) -> Result[Response]:
        """クエリRPCを発行"""
        call_options = self._client.resolve_options(options)

        async def run(stub: DgraphStub) -> Result[Response]:
            return Result.ok(Response(await stub.query(request, call_options)))

        return await self._client.dgraph_execute(run, transport_failure)

    def _merge_context(self, incoming: TxnContext | None) -> Result[None]:
        return merge_context(self.context, incoming)

    def _context_snapshot(self) -> TxnContext:
        """RPCに渡すためのコンテキストのコピー"""
        return self.context.copy()

    def _assert_not_disposed(self) -> None:
        """破棄済みなら例外を送出 (サブクラスで実装)"""

from unittest.mock import AsyncMock

import grpc
import pytest

from dgraph_client import ClientConfig, DgraphClient
from dgraph_client.connections.base import DgraphStub
from dgraph_client.exceptions import (
    AlreadyDisposedError,
    ExceptionalError,
    StartTsMismatchError,
    TransportError,
)
from dgraph_client.mocks import rpc_error
from dgraph_client.models.types import DgraphResponse, TransactionState, TxnContext
from dgraph_client.transactions import Query


class TestQuery:
    """読み取り専用クエリのテスト"""

    @pytest.fixture
    def stub(self):
        mock = AsyncMock(spec=DgraphStub)
        mock.query.return_value = DgraphResponse(
            json=b'{"q": [{"name": "Alice"}]}',
            txn=TxnContext(start_ts=11, hash="h11"),
        )
        return mock

    @pytest.fixture
    def client(self, stub):
        return DgraphClient([stub], ClientConfig(default_timeout_seconds=None))

    @pytest.mark.asyncio
    async def test_read_only_flags(self, client, stub):
        """読み取り専用フラグが設定される"""
        query = client.new_read_only_transaction()

        result = await query.query("{ q(func: has(name)) { name } }")

        assert isinstance(query, Query)
        assert result.is_success
        assert result.value.as_dict() == {"q": [{"name": "Alice"}]}
        sent = stub.query.await_args.args[0]
        assert sent.read_only is True
        assert sent.best_effort is False

    @pytest.mark.asyncio
    async def test_best_effort_flag(self, client, stub):
        """best_effortフラグが設定される"""
        query = client.new_read_only_transaction(best_effort=True)

        await query.query("{ q() {} }")

        assert stub.query.await_args.args[0].best_effort is True

    @pytest.mark.asyncio
    async def test_context_shared_between_queries(self, client, stub):
        """同じハンドルのクエリはstart_tsを共有する"""
        query = client.new_read_only_transaction()

        await query.query("{ a() {} }")
        await query.query_with_vars("query q($n: string) { b() {} }", {"$n": "x"})

        first, second = (call.args[0] for call in stub.query.await_args_list)
        assert first.start_ts == 0
        assert second.start_ts == 11
        assert second.hash == "h11"
        assert second.vars == {"$n": "x"}
        assert query.context.start_ts == 11

    @pytest.mark.asyncio
    async def test_start_ts_mismatch_drops_value(self, client, stub):
        """start_tsの不一致は値を持たない失敗になる"""
        query = client.new_read_only_transaction()
        await query.query("{ a() {} }")
        stub.query.return_value = DgraphResponse(txn=TxnContext(start_ts=12))

        result = await query.query("{ b() {} }")

        assert result.is_failed
        assert result.value is None
        assert isinstance(result.error, StartTsMismatchError)

    @pytest.mark.asyncio
    async def test_transport_failure_keeps_handle_usable(self, client, stub):
        """RPC失敗後もハンドルは使い続けられる"""
        query = client.new_read_only_transaction()
        stub.query.side_effect = [rpc_error(grpc.StatusCode.UNAVAILABLE), stub.query.return_value]

        failed = await query.query("{ a() {} }")
        succeeded = await query.query("{ a() {} }")

        assert isinstance(failed.error, TransportError)
        assert succeeded.is_success
        assert query.state == TransactionState.OK
        stub.commit_or_abort.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_failure(self, client, stub):
        """スタブの予期しない例外は失敗結果として返る"""
        decode_error = ValueError("cannot decode response")
        stub.query.side_effect = decode_error
        query = client.new_read_only_transaction()

        result = await query.query("{ q() {} }")

        assert result.is_failed
        assert result.value is None
        assert isinstance(result.error, ExceptionalError)
        assert result.error.last_error is decode_error
        assert "cannot decode response" in str(result.error)
        assert query.state == TransactionState.OK

    @pytest.mark.asyncio
    async def test_disposed_client_still_raises(self, client):
        """破棄済みクライアントでのクエリは例外を送出する"""
        query = client.new_read_only_transaction()
        await client.close()

        with pytest.raises(AlreadyDisposedError):
            await query.query("{ q() {} }")

    def test_query_has_no_commit(self, client):
        """読み取り専用クエリはコミットを持たない"""
        query = client.new_read_only_transaction()

        assert not hasattr(query, "commit")
        assert not hasattr(query, "do")

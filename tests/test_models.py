"""Tests for data models."""

import json

import pytest

from dgraph_client import (
    CallOptions,
    Mutation,
    Request,
    Response,
    Result,
    TransactionNotOKError,
    TransactionState,
)
from dgraph_client.models import DgraphResponse, TxnContext


class TestTransactionState:
    """Tests for TransactionState enum."""

    def test_states(self):
        """Test all transaction states."""
        assert [state.value for state in TransactionState] == [
            "ok", "committed", "aborted", "error"
        ]


class TestResult:
    """Tests for Result dataclass."""

    def test_ok(self):
        """Test successful result."""
        result = Result.ok(5)

        assert result.is_success
        assert not result.is_failed
        assert result.error is None
        assert result.unwrap() == 5

    def test_fail(self):
        """Test failed result."""
        error = TransactionNotOKError(TransactionState.ERROR)
        result = Result.fail(error)

        assert result.is_failed
        assert result.value is None
        assert result.error is error
        with pytest.raises(TransactionNotOKError):
            result.unwrap()

    def test_value_with_errors(self):
        """Test a result can carry a value and errors."""
        error = ValueError("merge failed")

        result = Result.ok("payload").with_errors([error])

        assert result.is_failed
        assert result.value == "payload"
        assert result.errors == [error]
        assert result.cast().value is None
        assert result.cast().errors == [error]


class TestRequest:
    """Tests for Request and Mutation dataclasses."""

    def test_is_empty(self):
        """Test empty request detection."""
        assert Request().is_empty()
        assert Request(query="  \n").is_empty()
        assert not Request(query="{ q() {} }").is_empty()
        assert not Request(mutations=[Mutation()]).is_empty()

    def test_mutation_from_obj(self):
        """Test building JSON mutations."""
        mutation = Mutation.from_obj({"name": "Alice"}, delete_obj={"uid": "0x1"}, cond="@if(true)")

        assert json.loads(mutation.set_json) == {"name": "Alice"}
        assert json.loads(mutation.delete_json) == {"uid": "0x1"}
        assert mutation.cond == "@if(true)"
        assert Mutation.from_obj().set_json == b""


class TestTxnContext:
    """Tests for TxnContext dataclass."""

    def test_copy_is_independent(self):
        """Test copy does not share key and predicate sets."""
        context = TxnContext(start_ts=5, hash="h5", keys={"k"}, preds={"p"}, aborted=True)

        copied = context.copy()
        copied.keys.add("k2")
        copied.preds.add("p2")

        assert copied is not context
        assert copied.start_ts == 5
        assert copied.hash == "h5"
        assert copied.aborted is True
        assert context.keys == {"k"}
        assert context.preds == {"p"}


class TestResponse:
    """Tests for Response wrapper."""

    def test_accessors(self):
        """Test response accessors."""
        txn = TxnContext(start_ts=3)
        response = Response(DgraphResponse(
            json=b'{"q": [{"uid": "0x1"}]}',
            txn=txn,
            uids={"a": "0x1"},
            latency={"total_ns": 10},
        ))

        assert response.json == '{"q": [{"uid": "0x1"}]}'
        assert response.as_dict() == {"q": [{"uid": "0x1"}]}
        assert response.txn == txn
        assert response.txn is not txn
        assert response.uids == {"a": "0x1"}
        assert response.latency == {"total_ns": 10}

    def test_txn_is_a_copy(self):
        """Test changes to the returned context do not reach the response."""
        txn = TxnContext(start_ts=3, hash="h", keys={"k1"}, preds={"name"})
        response = Response(DgraphResponse(txn=txn))

        returned = response.txn
        returned.start_ts = 99
        returned.keys.add("k2")
        returned.preds.clear()

        assert response.txn == TxnContext(start_ts=3, hash="h", keys={"k1"}, preds={"name"})
        assert txn.keys == {"k1"}
        assert txn.preds == {"name"}

    def test_empty_response(self):
        """Test default response is empty."""
        response = Response()

        assert response.json == ""
        assert response.as_dict() == {}
        assert response.txn is None


class TestCallOptions:
    """Tests for CallOptions dataclass."""

    def test_to_kwargs(self):
        """Test conversion to grpc call keyword arguments."""
        assert CallOptions().to_kwargs() == {}
        assert CallOptions(timeout=1.5, metadata=(("a", "b"),), wait_for_ready=True).to_kwargs() == {
            "timeout": 1.5,
            "metadata": (("a", "b"),),
            "wait_for_ready": True,
        }

    def test_with_metadata(self):
        """Test adding metadata entries."""
        options = CallOptions(timeout=1).with_metadata("accessJwt", "token")

        assert options.timeout == 1
        assert options.metadata == (("accessJwt", "token"),)

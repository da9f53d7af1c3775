"""Mock implementations for dgraph_client.

This module provides in-memory mock implementations of the RPC layer for
testing purposes, so transactions can be exercised without a Dgraph cluster.
"""

from .connections import MockDgraphStub, rpc_error
from .data_store import InMemoryDgraphStore, TransactionConflict

__all__ = ["InMemoryDgraphStore", "MockDgraphStub", "TransactionConflict", "rpc_error"]

"""トランザクション管理モジュール"""

from dgraph_client.transactions.base import TransactionBase
from dgraph_client.transactions.context import merge_context
from dgraph_client.transactions.query import Query
from dgraph_client.transactions.transaction import Transaction

__all__ = [
    "Query",
    "Transaction",
    "TransactionBase",
    "merge_context",
]

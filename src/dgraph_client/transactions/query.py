"""読み取り専用クエリハンドル"""

from typing import TYPE_CHECKING

from dgraph_client.transactions.base import TransactionBase

if TYPE_CHECKING:
    from dgraph_client.client import DgraphClient


class Query(TransactionBase):
    """読み取り専用クエリ

    コミットはしない。同じハンドルで複数のクエリを実行すると、
    タイムスタンプとコンテキストが共有される。
    """

    def __init__(self, client: "DgraphClient", best_effort: bool = False):
        super().__init__(client, read_only=True, best_effort=best_effort)

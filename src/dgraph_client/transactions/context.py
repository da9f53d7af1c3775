"""トランザクションコンテキストのマージ"""

import logging

from dgraph_client.exceptions import StartTsMismatchError
from dgraph_client.models.result import Result
from dgraph_client.models.types import TxnContext

logger = logging.getLogger(__name__)


def merge_context(local: TxnContext, incoming: TxnContext | None) -> Result[None]:
    """サーバーから返されたコンテキストをローカルのコンテキストに取り込む"""
    if incoming is None:
        return Result.ok()

    if local.start_ts == 0:
        local.start_ts = incoming.start_ts

    if local.start_ts != incoming.start_ts:
        logger.error(
            "StartTs mismatch: local %d, incoming %d", local.start_ts, incoming.start_ts
        )
        return Result.fail(StartTsMismatchError(local.start_ts, incoming.start_ts))

    local.hash = incoming.hash
    local.keys.update(incoming.keys)
    local.preds.update(incoming.preds)

    return Result.ok()

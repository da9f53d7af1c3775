"""In-memory data store for mock implementations.

This module provides a small in-memory stand-in for a Dgraph cluster: a
timestamp oracle, JSON set/delete mutations staged per transaction, and
conflict detection at commit time. Reads are simplified and do not honour
snapshot isolation.
"""

import json
import time
from collections import defaultdict
from typing import Any


class TransactionConflict(Exception):
    """Raised by commit() when another transaction wrote the same keys."""


class InMemoryDgraphStore:
    """In-memory Dgraph data for the mock stub."""

    def __init__(self):
        """Initialize empty data structures."""
        # Timestamp oracle
        self.max_ts = 0
        self._next_uid = 0

        # Committed data
        self.nodes: dict[str, dict[str, Any]] = {}
        self.key_commits: dict[str, int] = {}
        self.schema: list[str] = []

        # Pending transactions, keyed by start_ts
        self.pending_sets: dict[int, list[dict[str, Any]]] = defaultdict(list)
        self.pending_deletes: dict[int, list[str]] = defaultdict(list)
        self.pending_keys: dict[int, set[str]] = defaultdict(set)

        # ACL
        self.users: dict[tuple[str, int], str] = {}

        # Statistics
        self.query_count = 0
        self.commit_count = 0
        self.abort_count = 0
        self.last_reset_time = time.time()

    def clear(self) -> None:
        """Clear all data (for test isolation)."""
        self.__init__()

    def get_stats(self) -> dict[str, Any]:
        """Get current statistics about the data store."""
        return {
            "nodes_count": len(self.nodes),
            "max_ts": self.max_ts,
            "pending_transactions": len(self.pending_keys),
            "query_count": self.query_count,
            "commit_count": self.commit_count,
            "abort_count": self.abort_count,
            "uptime_seconds": time.time() - self.last_reset_time,
        }

    def next_timestamp(self) -> int:
        """Allocate a new timestamp."""
        self.max_ts += 1
        return self.max_ts

    def add_user(self, user: str, password: str, namespace: int = 0) -> None:
        self.users[(user, namespace)] = password

    def check_login(self, user: str, password: str, namespace: int) -> bool:
        """Users are only checked once at least one is registered."""
        if not self.users:
            return True
        return self.users.get((user, namespace)) == password

    def stage_set(self, start_ts: int, payload: bytes) -> tuple[dict[str, str], set[str], set[str]]:
        """Stage a JSON set mutation.

        Returns:
            Tuple of (blank node uid map, conflict keys, predicates)
        """
        uids: dict[str, str] = {}
        keys: set[str] = set()
        preds: set[str] = set()

        for obj in self._objects(payload):
            uid = str(obj.get("uid", ""))
            if not uid or uid.startswith("_:"):
                blank = uid[2:] if uid else f"blank-{len(uids)}"
                uid = self._allocate_uid()
                uids[blank] = uid
            node = {pred: value for pred, value in obj.items() if pred != "uid"}
            node["uid"] = uid
            self.pending_sets[start_ts].append(node)
            for pred in node:
                if pred == "uid":
                    continue
                keys.add(f"{pred}/{uid}")
                preds.add(pred)

        self.pending_keys[start_ts].update(keys)
        return uids, keys, preds

    def stage_delete(self, start_ts: int, payload: bytes) -> tuple[set[str], set[str]]:
        """Stage a JSON delete mutation, deleting whole nodes by uid."""
        keys: set[str] = set()
        preds: set[str] = set()

        for obj in self._objects(payload):
            uid = str(obj.get("uid", ""))
            if not uid:
                continue
            self.pending_deletes[start_ts].append(uid)
            for pred in self.nodes.get(uid, {}):
                if pred == "uid":
                    continue
                keys.add(f"{pred}/{uid}")
                preds.add(pred)

        self.pending_keys[start_ts].update(keys)
        return keys, preds

    def read(self, start_ts: int) -> list[dict[str, Any]]:
        """Committed nodes plus the transaction's own pending writes."""
        view = {uid: dict(node) for uid, node in self.nodes.items()}
        for node in self.pending_sets.get(start_ts, []):
            view.setdefault(node["uid"], {}).update(node)
        for uid in self.pending_deletes.get(start_ts, []):
            view.pop(uid, None)
        return sorted(view.values(), key=lambda node: node["uid"])

    def commit(self, start_ts: int) -> int:
        """Commit pending writes, returns the commit timestamp.

        Raises:
            TransactionConflict: If a key was committed after ``start_ts``
        """
        keys = self.pending_keys.get(start_ts, set())
        for key in keys:
            if self.key_commits.get(key, 0) > start_ts:
                self.abort(start_ts)
                raise TransactionConflict(f"conflict on key {key}")

        commit_ts = self.next_timestamp()
        for node in self.pending_sets.pop(start_ts, []):
            self.nodes.setdefault(node["uid"], {}).update(node)
        for uid in self.pending_deletes.pop(start_ts, []):
            self.nodes.pop(uid, None)
        for key in self.pending_keys.pop(start_ts, set()):
            self.key_commits[key] = commit_ts

        self.commit_count += 1
        return commit_ts

    def abort(self, start_ts: int) -> None:
        """Drop pending writes of a transaction."""
        self.pending_sets.pop(start_ts, None)
        self.pending_deletes.pop(start_ts, None)
        self.pending_keys.pop(start_ts, None)
        self.abort_count += 1

    def drop_all(self) -> None:
        self.nodes.clear()
        self.key_commits.clear()
        self.schema.clear()

    def _allocate_uid(self) -> str:
        self._next_uid += 1
        return hex(self._next_uid)

    @staticmethod
    def _objects(payload: bytes) -> list[dict[str, Any]]:
        data = json.loads(payload)
        return data if isinstance(data, list) else [data]

"""Type definitions for dgraph_client.

These dataclasses mirror the Dgraph protocol messages the client exchanges
with a ``DgraphStub``. Encoding them on the wire is the stub's business.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class TransactionState(Enum):
    """Transaction lifecycle state."""
    OK = "ok"
    COMMITTED = "committed"
    ABORTED = "aborted"
    ERROR = "error"


@dataclass
class TxnContext:
    """Transaction context accumulated from server responses."""
    start_ts: int = 0
    hash: str = ""
    keys: set[str] = field(default_factory=set)
    preds: set[str] = field(default_factory=set)
    aborted: bool = False

    def copy(self) -> "TxnContext":
        """Copy with independent key and predicate sets."""
        return replace(self, keys=set(self.keys), preds=set(self.preds))


@dataclass
class Mutation:
    """A single mutation inside a request."""
    set_json: bytes = b""
    delete_json: bytes = b""
    set_nquads: bytes = b""
    del_nquads: bytes = b""
    cond: str = ""

    @classmethod
    def from_obj(cls, set_obj: Any = None, delete_obj: Any = None, cond: str = "") -> "Mutation":
        """Build a mutation from JSON-serialisable objects."""
        return cls(
            set_json=json.dumps(set_obj).encode() if set_obj is not None else b"",
            delete_json=json.dumps(delete_obj).encode() if delete_obj is not None else b"",
            cond=cond,
        )


@dataclass
class Request:
    """Query and/or mutation request."""
    query: str = ""
    vars: dict[str, str] = field(default_factory=dict)
    mutations: list[Mutation] = field(default_factory=list)
    commit_now: bool = False
    start_ts: int = 0
    hash: str = ""
    read_only: bool = False
    best_effort: bool = False

    def is_empty(self) -> bool:
        """A request without query text and without mutations does nothing."""
        return not self.query.strip() and not self.mutations


@dataclass
class DgraphResponse:
    """Raw response returned by the query RPC."""
    json: bytes = b""
    txn: TxnContext | None = None
    uids: dict[str, str] = field(default_factory=dict)
    latency: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class Response:
    """Read-only view of a query or mutation result."""
    dgraph_response: DgraphResponse = field(default_factory=DgraphResponse)

    @property
    def json(self) -> str:
        return self.dgraph_response.json.decode()

    @property
    def uids(self) -> dict[str, str]:
        return dict(self.dgraph_response.uids)

    @property
    def txn(self) -> TxnContext | None:
        txn = self.dgraph_response.txn
        return txn.copy() if txn is not None else None

    @property
    def latency(self) -> dict[str, int]:
        return dict(self.dgraph_response.latency)

    def as_dict(self) -> dict[str, Any]:
        """Decode the JSON payload, empty payloads decode to ``{}``."""
        if not self.dgraph_response.json:
            return {}
        return json.loads(self.dgraph_response.json)


@dataclass
class Operation:
    """Schema alteration request."""
    schema: str = ""
    drop_attr: str = ""
    drop_all: bool = False
    drop_op: str = ""
    drop_value: str = ""
    run_in_background: bool = False


@dataclass
class LoginRequest:
    """Login request for ACL enabled clusters."""
    userid: str = ""
    password: str = ""
    namespace: int = 0
    refresh_token: str = ""


@dataclass
class Jwt:
    """Tokens issued by a successful login."""
    access_jwt: str = ""
    refresh_jwt: str = ""


@dataclass
class Check:
    """Empty version check request."""


@dataclass
class Version:
    """Server version information."""
    tag: str = ""


@dataclass
class CallOptions:
    """Per-call RPC options."""
    timeout: float | None = None
    metadata: tuple[tuple[str, str], ...] | None = None
    wait_for_ready: bool | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for a ``grpc.aio`` stub call."""
        kwargs: dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self.metadata is not None:
            kwargs["metadata"] = self.metadata
        if self.wait_for_ready is not None:
            kwargs["wait_for_ready"] = self.wait_for_ready
        return kwargs

    def with_metadata(self, key: str, value: str) -> "CallOptions":
        """Return a copy with one extra metadata entry."""
        return replace(self, metadata=(*(self.metadata or ()), (key, value)))

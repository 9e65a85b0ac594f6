"""Builders for compact wire replies and result sets, plus test doubles."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from redisgraph_client.types import Column, ColumnType, ResultSet, Scalar, Statistics

TIMING = b"Query internal execution time: 0.213 milliseconds"


def s_nil() -> List[Any]:
    return [1, None]


def s_str(value: str) -> List[Any]:
    return [2, value.encode("utf-8")]


def s_int(value: int) -> List[Any]:
    return [3, value]


def s_bool(value: bool) -> List[Any]:
    return [4, b"true" if value else b"false"]


def s_double(value: float) -> List[Any]:
    return [5, repr(value).encode("ascii")]


def s_array(*items: List[Any]) -> List[Any]:
    return [6, list(items)]


def s_edge(edge: List[Any]) -> List[Any]:
    return [7, edge]


def s_node(node: List[Any]) -> List[Any]:
    return [8, node]


def prop(key_id: int, scalar: List[Any]) -> List[Any]:
    return [key_id, scalar[0], scalar[1]]


def node(node_id: int, label_ids: Sequence[int], *props: List[Any]) -> List[Any]:
    return [node_id, list(label_ids), list(props)]


def edge(edge_id: int, type_id: int, src: int, dst: int, *props: List[Any]) -> List[Any]:
    return [edge_id, type_id, src, dst, list(props)]


def header(*names: str, kind: int = 1) -> List[Any]:
    return [[kind, name.encode("utf-8")] for name in names]


def reply(header_row: List[Any], rows: List[List[Any]], *stats: bytes) -> List[Any]:
    return [header_row, rows, list(stats) or [TIMING]]


def stats_reply(*stats: bytes) -> List[Any]:
    return [list(stats) or [TIMING]]


def mapping_reply(column: str, names: Sequence[str]) -> List[Any]:
    return reply(header(column), [[s_str(name)] for name in names])


def result_set(names: Sequence[str], rows: Sequence[Sequence[Scalar]]) -> ResultSet:
    """Build a scalar-only ResultSet from rows of Scalars."""
    columns = [
        Column(name=name, kind=ColumnType.SCALAR, cells=[row[i] for row in rows])
        for i, name in enumerate(names)
    ]
    return ResultSet(columns=columns, statistics=Statistics([]))


# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class FakeClient:
    """RedisClient test double.

    Returns scripted replies keyed by query text. An ``in_order(...)``
    series is consumed one reply per call; an exception instance is raised
    instead of returned. Every command is recorded in ``commands``.
    """

    replies: Dict[str, Any] = field(default_factory=dict)
    commands: List[Tuple[Any, ...]] = field(default_factory=list)

    def execute(self, *args: Any) -> Any:
        self.commands.append(args)
        if args[0] == "GRAPH.DELETE":
            return b"Graph removed, internal execution time: 0.1 milliseconds"
        query = args[2]
        if query not in self.replies:
            raise AssertionError(f"unexpected query: {query}")
        reply = self.replies[query]
        if isinstance(reply, _Sequence):
            reply = reply.next()
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def queries(self) -> List[str]:
        return [args[2] for args in self.commands if args[0] == "GRAPH.QUERY"]


class _Sequence:
    def __init__(self, *replies: Any) -> None:
        self._replies = list(replies)

    def next(self) -> Any:
        return self._replies.pop(0)


def in_order(*replies: Any) -> _Sequence:
    """A series of replies for the same query, returned in order."""
    return _Sequence(*replies)


@dataclass
class StaticMapping:
    """Fixed name caches for parser tests."""

    labels: List[str] = field(default_factory=lambda: ["Rider", "Team"])
    relationship_types: List[str] = field(default_factory=lambda: ["rides"])
    property_keys: List[str] = field(default_factory=lambda: ["name", "birth_year", "height"])

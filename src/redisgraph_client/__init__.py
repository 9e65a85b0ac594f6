"""Typed RedisGraph client.

Example::

    from redisgraph_client import Graph, RedisClient
    from redisgraph_client.shapes import FLOAT, STRING, UINT32, Nullable, Record, Rows

    with RedisClient() as client:
        graph = Graph.open(client, "motogp")
        riders = graph.query(
            "MATCH (r:Rider) RETURN r.name, r.birth_year, r.height",
            Rows(Record(STRING, UINT32, Nullable(FLOAT))),
        )
"""

from .config import Config
from .errors import (
    ClientTypeError,
    ColumnCountMismatchError,
    InvalidUtf8Error,
    NoResultsError,
    RedisGraphError,
    ServerError,
    ServerTypeError,
    TypeMismatchError,
)
from .redisgraph import Graph, RedisClient
from .shapes import decode
from .types import Column, ColumnType, Node, Path, Relation, ResultSet, Scalar, ScalarKind, Statistics

__all__ = [
    "Config",
    "Graph",
    "RedisClient",
    "decode",
    "ResultSet",
    "Column",
    "ColumnType",
    "Scalar",
    "ScalarKind",
    "Node",
    "Relation",
    "Path",
    "Statistics",
    "RedisGraphError",
    "ServerError",
    "ServerTypeError",
    "InvalidUtf8Error",
    "ClientTypeError",
    "NoResultsError",
    "TypeMismatchError",
    "ColumnCountMismatchError",
]

"""End-to-end tests against a live RedisGraph server.

Run with ``REDISGRAPH_TEST_URL=redis://127.0.0.1:6379 pytest -m integration``.
Tests share one graph name and delete it afterwards, so they must not run
in parallel.
"""

from __future__ import annotations

import os
from typing import Iterator

import pytest

from redisgraph_client import Config, Graph, RedisClient
from redisgraph_client.errors import ColumnCountMismatchError, TypeMismatchError
from redisgraph_client.shapes import (
    BOOLEAN,
    BYTES,
    FLOAT,
    INTEGER,
    NIL,
    NODE,
    PATH,
    RELATION,
    SCALAR,
    STRING,
    UINT32,
    Nullable,
    Record,
    Rows,
)
from redisgraph_client.types import Node, Relation, Scalar

pytestmark = pytest.mark.integration


@pytest.fixture
def client() -> Iterator[RedisClient]:
    config = Config(REDIS_URL=os.environ.get("REDISGRAPH_TEST_URL", "redis://127.0.0.1:6379"))
    with RedisClient(config=config) as client:
        yield client


@pytest.fixture
def graph(client: RedisClient) -> Iterator[Graph]:
    graph = Graph.open(client, "test_graph")
    try:
        yield graph
    finally:
        graph.delete()


def test_open_delete(client: RedisClient) -> None:
    graph = Graph.open(client, "test_open_delete_graph")
    graph.delete()


def test_single(graph: Graph) -> None:
    assert graph.query("RETURN 42", INTEGER) == 42


def test_tuple(graph: Graph) -> None:
    value = graph.query("RETURN 42, 'Hello, world!', true", Record(INTEGER, STRING, BOOLEAN))

    assert value == (42, "Hello, world!", True)


def test_vec(graph: Graph) -> None:
    graph.mutate("CREATE (n1 { prop: 1 }), (n2 { prop: 2 }), (n3 { prop: 3 })")

    assert graph.query("MATCH (n) RETURN n.prop ORDER BY n.prop", Rows(INTEGER)) == [1, 2, 3]


def test_tuple_vec(graph: Graph) -> None:
    graph.mutate(
        "CREATE (n1 { num: 1, word: 'foo' }), (n2 { num: 2, word: 'bar' }), (n3 { num: 3, word: 'baz' })"
    )

    values = graph.query("MATCH (n) RETURN n.num, n.word ORDER BY n.num", Rows(Record(INTEGER, STRING)))

    assert values == [(1, "foo"), (2, "bar"), (3, "baz")]


def test_out_of_bounds(graph: Graph) -> None:
    with pytest.raises(ColumnCountMismatchError):
        graph.query("RETURN 42, 'Hello, world!'", Record(INTEGER, STRING, BOOLEAN))


def test_riders(graph: Graph) -> None:
    graph.mutate(
        "CREATE (:Rider {name: 'Valentino Rossi', birth_year: 1979}), "
        "(:Rider {name: 'Dani Pedrosa', birth_year: 1985, height: 1.58})"
    )
    query = "MATCH (r:Rider) RETURN r.name, r.birth_year, r.height ORDER BY r.birth_year"

    riders = graph.query(query, Rows(Record(STRING, UINT32, Nullable(FLOAT))))

    assert riders == [("Valentino Rossi", 1979, None), ("Dani Pedrosa", 1985, 1.58)]
    with pytest.raises(TypeMismatchError):
        graph.query(query, Rows(Record(STRING, UINT32, FLOAT)))


def test_conversions(graph: Graph) -> None:
    assert graph.query("RETURN 42", SCALAR) == Scalar.integer(42)
    assert graph.query("RETURN null", NIL) is None
    assert graph.query("RETURN 42, null", Record(Nullable(INTEGER), Nullable(INTEGER))) == (42, None)
    assert graph.query("RETURN 12.3", FLOAT) == 12.3
    assert graph.query("RETURN 'Hello, world!'", BYTES) == b"Hello, world!"


def test_node(graph: Graph) -> None:
    graph.mutate("CREATE (n:NodeLabel { prop: 42 })")

    node = graph.query("MATCH (n) RETURN n", NODE)

    assert node == Node(labels=["NodeLabel"], properties={"prop": Scalar.integer(42)})


def test_edge(graph: Graph) -> None:
    graph.mutate("CREATE (src)-[rel:RelationType { prop: 42 }]->(dst)")

    relation = graph.query("MATCH (src)-[rel]->(dst) RETURN rel", RELATION)

    assert relation == Relation(type_name="RelationType", properties={"prop": Scalar.integer(42)})


def test_path(graph: Graph) -> None:
    graph.mutate(
        "CREATE (:L1 {prop: 1})-[:R1 {prop: 2}]->(:L2 {prop: 3})-[:R2 {prop: 4}]->(:L3 {prop: 5})"
    )

    path = graph.query("MATCH p = (:L1)-[:R1]->(:L2)-[:R2]->(:L3) RETURN p", PATH)

    assert len(path) == 2
    assert [node.labels for node in path.nodes] == [["L1"], ["L2"], ["L3"]]
    assert [edge.type_name for edge in path.edges] == ["R1", "R2"]
    assert [edge.properties["prop"] for edge in path.edges] == [Scalar.integer(2), Scalar.integer(4)]

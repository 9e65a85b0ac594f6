"""CLI commands wired to a scripted client."""

from __future__ import annotations

import json

import pytest

from redisgraph_client import cli
from redisgraph_client.errors import ServerError
from tests.helpers import FakeClient, header, mapping_reply, reply, s_double, s_int, s_nil, s_str, stats_reply

pytestmark = pytest.mark.unit


class ContextFakeClient(FakeClient):
    def __enter__(self) -> "ContextFakeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        return None


@pytest.fixture
def cli_client(monkeypatch: pytest.MonkeyPatch) -> ContextFakeClient:
    client = ContextFakeClient()
    monkeypatch.setattr(cli, "RedisClient", lambda config: client)
    return client


def test_query_prints_rows(cli_client: ContextFakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    query = "MATCH (r:Rider) RETURN r.name, r.height"
    cli_client.replies = {
        query: reply(
            header("r.name", "r.height"),
            [[s_str("Dani Pedrosa"), s_double(1.58)], [s_str("Valentino Rossi"), s_nil()]],
        )
    }

    assert cli.main(["--graph", "motogp", "query", query]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["count"] == 2
    assert output["columns"] == ["r.name", "r.height"]
    assert output["results"] == [
        {"r.name": "Dani Pedrosa", "r.height": 1.58},
        {"r.name": "Valentino Rossi", "r.height": None},
    ]
    assert cli_client.commands[0][1] == "motogp"


def test_mutate_prints_statistics(cli_client: ContextFakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    query = "CREATE (:Rider {name: 'Marc Marquez'})"
    cli_client.replies = {query: stats_reply(b"Labels added: 1", b"Nodes created: 1")}

    assert cli.main(["mutate", query]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["statistics"] == {"Labels added": 1, "Nodes created": 1}
    assert cli_client.commands[0][1] == "default"


def test_graph_name_from_environment(
    cli_client: ContextFakeClient, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("REDISGRAPH_GRAPH", "from-env")

    assert cli.main(["delete"]) == 0

    assert cli_client.commands == [("GRAPH.DELETE", "from-env")]
    assert json.loads(capsys.readouterr().out) == {"deleted": "from-env"}


def test_labels(cli_client: ContextFakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    cli_client.replies = {
        "CALL db.labels()": mapping_reply("label", ["Rider", "Team"]),
        "CALL db.relationshipTypes()": mapping_reply("relationshipType", ["rides"]),
        "CALL db.propertyKeys()": mapping_reply("propertyKey", ["name"]),
    }

    assert cli.main(["labels"]) == 0

    assert json.loads(capsys.readouterr().out) == {
        "labels": ["Rider", "Team"],
        "relationship_types": ["rides"],
        "property_keys": ["name"],
    }


def test_errors_return_nonzero(cli_client: ContextFakeClient) -> None:
    cli_client.replies = {"RETURN": ServerError("GRAPH.QUERY failed: errMsg: Invalid input")}

    assert cli.main(["query", "RETURN"]) == 1


def test_query_count(cli_client: ContextFakeClient, capsys: pytest.CaptureFixture[str]) -> None:
    cli_client.replies = {"RETURN 42": reply(header("42"), [[s_int(42)]])}

    cli.main(["query", "RETURN 42"])

    assert json.loads(capsys.readouterr().out)["results"] == [{"42": 42}]


def test_query_keeps_repeated_column_names(
    cli_client: ContextFakeClient, capsys: pytest.CaptureFixture[str]
) -> None:
    query = "MATCH (n) RETURN n.x, n.x"
    cli_client.replies = {query: reply(header("n.x", "n.x"), [[s_int(1), s_int(2)]])}

    assert cli.main(["query", query]) == 0

    output = json.loads(capsys.readouterr().out)
    assert output["columns"] == ["n.x", "n.x"]
    assert output["results"] == [{"n.x": 1, "n.x_1": 2}]

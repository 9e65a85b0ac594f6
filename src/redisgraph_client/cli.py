"""Simple CLI for running RedisGraph queries from the shell.

Usage examples (from project root):

    redisgraph-client query "MATCH (r:Rider) RETURN r.name, r.birth_year"

    redisgraph-client --graph motogp mutate \
        "CREATE (:Rider {name: 'Dani Pedrosa', birth_year: 1985})"

    python -m redisgraph_client.cli labels

The CLI uses:
- .env configuration (REDIS_URL, REDIS_PASSWORD, REDISGRAPH_GRAPH, LOG_LEVEL)
- RedisClient for the connection
- Graph for the GRAPH.* commands
"""

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

from .config import Config
from .errors import RedisGraphError
from .redisgraph import Graph, RedisClient
from .shapes import RESULT_SET

logger = logging.getLogger(__name__)


def _graph_name(args: argparse.Namespace, config: Config) -> str:
    return args.graph or config.graph_name


def _cmd_query(args: argparse.Namespace, config: Config) -> None:
    """Run a read query and print its rows as JSON objects."""

    client = RedisClient(config=config)

    with client:
        graph = Graph(client, _graph_name(args, config))
        result_set = graph.query(args.query, RESULT_SET)

    serializable: Dict[str, Any] = {
        "count": result_set.num_rows,
        "columns": result_set.column_names,
        "results": result_set.to_dicts(),
        "statistics": result_set.statistics.messages,
    }

    print(json.dumps(serializable, indent=2, sort_keys=True))


def _cmd_mutate(args: argparse.Namespace, config: Config) -> None:
    """Run a write query and print the statistics it reports."""

    client = RedisClient(config=config)

    with client:
        graph = Graph(client, _graph_name(args, config))
        statistics = graph.mutate_with_statistics(args.query)

    serializable: Dict[str, Any] = {
        "statistics": statistics.as_dict(),
        "messages": statistics.messages,
    }

    print(json.dumps(serializable, indent=2, sort_keys=True))


def _cmd_delete(args: argparse.Namespace, config: Config) -> None:
    """Delete the whole graph."""

    client = RedisClient(config=config)
    name = _graph_name(args, config)

    with client:
        Graph(client, name).delete()

    print(json.dumps({"deleted": name}, indent=2))


def _cmd_labels(args: argparse.Namespace, config: Config) -> None:
    """Print the graph's labels, relationship types and property keys."""

    client = RedisClient(config=config)

    with client:
        graph = Graph(client, _graph_name(args, config))
        graph.update_labels()
        graph.update_relationship_types()
        graph.update_property_keys()

    serializable: Dict[str, List[str]] = {
        "labels": graph.labels,
        "relationship_types": graph.relationship_types,
        "property_keys": graph.property_keys,
    }

    print(json.dumps(serializable, indent=2, sort_keys=True))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CLI for running RedisGraph queries",
    )
    parser.add_argument(
        "--graph",
        type=str,
        default=None,
        help="Graph name (defaults to REDISGRAPH_GRAPH)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_query = subparsers.add_parser(
        "query",
        help="Run a query with a RETURN clause and print the rows",
    )
    p_query.add_argument("query", type=str, help="Cypher query text")
    p_query.set_defaults(func=_cmd_query)

    p_mutate = subparsers.add_parser(
        "mutate",
        help="Run a query without return values and print its statistics",
    )
    p_mutate.add_argument("query", type=str, help="Cypher query text")
    p_mutate.set_defaults(func=_cmd_mutate)

    p_delete = subparsers.add_parser(
        "delete",
        help="Delete the entire graph (not easily reversible)",
    )
    p_delete.set_defaults(func=_cmd_delete)

    p_labels = subparsers.add_parser(
        "labels",
        help="List labels, relationship types and property keys of the graph",
    )
    p_labels.set_defaults(func=_cmd_labels)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config()
    logging.basicConfig(level=config.log_level.upper())

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        args.func(args, config)
    except (RedisGraphError, ConnectionError) as e:
        logger.error("%s failed: %s", args.command, e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

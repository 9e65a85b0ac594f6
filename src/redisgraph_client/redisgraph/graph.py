"""A handle on a single RedisGraph graph.

Queries are sent with ``--compact`` so the server replies with numeric ids
for labels, relationship types and property keys. The handle keeps the
id -> name caches and refreshes them whenever a reply references an id it
does not know yet.

Important: a Graph owns mutable caches and is not meant to be shared
between threads. The connection itself is managed by the caller through
the RedisClient passed in.
"""

from __future__ import annotations

import logging
import time
from typing import Any, List, Set, Tuple, Type

from ..errors import (
    LabelNotFoundError,
    MappingNotFoundError,
    PropertyKeyNotFoundError,
    RelationshipTypeNotFoundError,
)
from ..shapes import TableShape, decode
from ..types import ResultSet, Statistics
from .client import RedisClient
from .parser import parse_mapping, parse_result_set

logger = logging.getLogger(__name__)

DUMMY_LABEL = "__DUMMY_LABEL__"


class Graph:
    """Represents a single graph in the database."""

    def __init__(self, client: RedisClient, name: str) -> None:
        self.client = client
        self._name = name
        self._labels: List[str] = []
        self._relationship_types: List[str] = []
        self._property_keys: List[str] = []

    @classmethod
    def open(cls, client: RedisClient, name: str) -> "Graph":
        """Open the graph with the given name.

        If the graph does not exist yet it is created, so that ``delete()``
        succeeds afterwards.
        """
        graph = cls(client, name)
        # Create a dummy node and delete it again.
        graph.mutate(f"CREATE (dummy:{DUMMY_LABEL})")
        graph.mutate(f"MATCH (dummy:{DUMMY_LABEL}) DELETE dummy")
        return graph

    def query(self, query: str, shape: TableShape) -> Any:
        """Execute the given query and decode its return values with ``shape``.

        Only use this for queries with a ``RETURN`` statement.
        """
        value, _ = self.query_with_statistics(query, shape)
        return value

    def query_with_statistics(self, query: str, shape: TableShape) -> Tuple[Any, Statistics]:
        """Same as :meth:`query`, but also return the query statistics."""
        result_set = self._get_result_set(self._request(query))
        return decode(result_set, shape), result_set.statistics

    def mutate(self, query: str) -> None:
        """Execute the given query while not returning any values.

        To mutate the graph and retrieve values in one query, use
        :meth:`query` instead.
        """
        self.mutate_with_statistics(query)

    def mutate_with_statistics(self, query: str) -> Statistics:
        """Same as :meth:`mutate`, but return the query statistics."""
        result_set = self._get_result_set(self._request(query))
        return result_set.statistics

    def delete(self) -> None:
        """Delete the entire graph from the database.

        *This action is not easily reversible.*
        """
        logger.info("Deleting graph %s", self._name)
        self.client.execute("GRAPH.DELETE", self._name)

    def update_labels(self) -> None:
        """Refresh the label names from the database.

        There is no real need to call this manually; the cache is refreshed
        automatically when it becomes outdated.
        """
        self._labels = parse_mapping(self._request("CALL db.labels()"), self)

    def update_relationship_types(self) -> None:
        """Refresh the relationship type names from the database."""
        self._relationship_types = parse_mapping(
            self._request("CALL db.relationshipTypes()"), self
        )

    def update_property_keys(self) -> None:
        """Refresh the property key names from the database."""
        self._property_keys = parse_mapping(self._request("CALL db.propertyKeys()"), self)

    @property
    def name(self) -> str:
        return self._name

    @property
    def labels(self) -> List[str]:
        return self._labels

    @property
    def relationship_types(self) -> List[str]:
        return self._relationship_types

    @property
    def property_keys(self) -> List[str]:
        return self._property_keys

    def _request(self, query: str) -> Any:
        start = time.perf_counter()
        response = self.client.execute("GRAPH.QUERY", self._name, query, "--compact")
        logger.debug(
            "GRAPH.QUERY %s completed in %.4fs: %s",
            self._name,
            time.perf_counter() - start,
            query,
        )
        return response

    def _get_result_set(self, response: Any) -> ResultSet:
        refreshed: Set[Type[MappingNotFoundError]] = set()
        while True:
            try:
                return parse_result_set(response, self)
            except MappingNotFoundError as e:
                # each cache is refreshed at most once per reply
                if type(e) in refreshed:
                    raise
                refreshed.add(type(e))
                logger.info("Refreshing %s cache of graph %s (%s)", e.kind, self._name, e)
                if isinstance(e, LabelNotFoundError):
                    self.update_labels()
                elif isinstance(e, RelationshipTypeNotFoundError):
                    self.update_relationship_types()
                elif isinstance(e, PropertyKeyNotFoundError):
                    self.update_property_keys()
                else:
                    raise

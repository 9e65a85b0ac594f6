"""Data model for RedisGraph query replies.

A :class:`ResultSet` is the raw, self-describing table returned by one
``GRAPH.QUERY`` call: a header of typed columns plus the statistics the
server reports. Cell values are :class:`Scalar` instances (a closed set of
kinds, one per wire type code) or graph entities for typed node/relation
columns.

Nothing here talks to Redis; see ``redisgraph_client.redisgraph.parser``
for the wire format and ``redisgraph_client.shapes`` for turning a result
set into plain Python values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple, Union

from .errors import ClientTypeError


class ScalarKind(IntEnum):
    """Scalar type codes used by the ``--compact`` protocol."""

    UNKNOWN = 0
    NIL = 1
    STRING = 2
    INTEGER = 3
    BOOLEAN = 4
    DOUBLE = 5
    ARRAY = 6
    EDGE = 7
    NODE = 8
    PATH = 9
    MAP = 10
    POINT = 11


class ColumnType(IntEnum):
    """Column type codes used in the reply header."""

    UNKNOWN = 0
    SCALAR = 1
    NODE = 2
    RELATION = 3


@dataclass
class Node:
    """A node returned by RedisGraph.

    ``id`` is the server's internal id; it is not part of equality.
    """

    labels: List[str] = field(default_factory=list)
    properties: Dict[str, "Scalar"] = field(default_factory=dict)
    id: Optional[int] = field(default=None, compare=False)

    def to_python(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "labels": list(self.labels),
            "properties": {k: v.to_python() for k, v in self.properties.items()},
        }


@dataclass
class Relation:
    """A relation (edge) returned by RedisGraph."""

    type_name: str
    properties: Dict[str, "Scalar"] = field(default_factory=dict)
    id: Optional[int] = field(default=None, compare=False)
    src_node_id: Optional[int] = field(default=None, compare=False)
    dst_node_id: Optional[int] = field(default=None, compare=False)

    def to_python(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type_name,
            "src_node_id": self.src_node_id,
            "dst_node_id": self.dst_node_id,
            "properties": {k: v.to_python() for k, v in self.properties.items()},
        }


@dataclass
class Path:
    """A path returned by RedisGraph.

    The length of a path is its number of edges.
    """

    nodes: List[Node] = field(default_factory=list)
    edges: List[Relation] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.edges)

    def to_python(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_python() for node in self.nodes],
            "edges": [edge.to_python() for edge in self.edges],
        }


@dataclass(frozen=True)
class Scalar:
    """A scalar value returned by RedisGraph.

    ``value`` depends on ``kind``:

    - NIL: ``None``
    - STRING: raw ``bytes`` (not necessarily valid UTF-8)
    - INTEGER: ``int``
    - BOOLEAN: ``bool``
    - DOUBLE: ``float``
    - ARRAY: ``list`` of :class:`Scalar`
    - EDGE / NODE / PATH: :class:`Relation` / :class:`Node` / :class:`Path`
    - MAP: ``dict`` of ``str`` to :class:`Scalar`
    - POINT: ``(latitude, longitude)`` tuple of floats

    Use the named constructors rather than building instances by hand.

    Instances are immutable, but only scalars holding hashable values can be
    hashed: ``hash()`` raises TypeError for ARRAY, MAP, NODE, EDGE and PATH.
    """

    kind: ScalarKind
    value: Any = None

    @classmethod
    def nil(cls) -> "Scalar":
        return cls(ScalarKind.NIL)

    @classmethod
    def string(cls, value: Union[str, bytes]) -> "Scalar":
        if isinstance(value, str):
            value = value.encode("utf-8")
        return cls(ScalarKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> "Scalar":
        return cls(ScalarKind.INTEGER, value)

    @classmethod
    def boolean(cls, value: bool) -> "Scalar":
        return cls(ScalarKind.BOOLEAN, value)

    @classmethod
    def double(cls, value: float) -> "Scalar":
        return cls(ScalarKind.DOUBLE, value)

    @classmethod
    def array(cls, values: List["Scalar"]) -> "Scalar":
        return cls(ScalarKind.ARRAY, list(values))

    @classmethod
    def edge(cls, relation: Relation) -> "Scalar":
        return cls(ScalarKind.EDGE, relation)

    @classmethod
    def node(cls, node: Node) -> "Scalar":
        return cls(ScalarKind.NODE, node)

    @classmethod
    def path(cls, path: Path) -> "Scalar":
        return cls(ScalarKind.PATH, path)

    @classmethod
    def map(cls, entries: Dict[str, "Scalar"]) -> "Scalar":
        return cls(ScalarKind.MAP, dict(entries))

    @classmethod
    def point(cls, latitude: float, longitude: float) -> "Scalar":
        return cls(ScalarKind.POINT, (latitude, longitude))

    @property
    def is_nil(self) -> bool:
        return self.kind is ScalarKind.NIL

    def to_python(self) -> Any:
        """Render this scalar as plain, JSON-friendly Python data.

        Strings that are not valid UTF-8 are decoded with replacement
        characters; use the ``BYTES`` shape when the raw bytes matter.
        """
        kind = self.kind
        if kind is ScalarKind.STRING:
            return self.value.decode("utf-8", errors="replace")
        if kind is ScalarKind.ARRAY:
            return [item.to_python() for item in self.value]
        if kind is ScalarKind.MAP:
            return {k: v.to_python() for k, v in self.value.items()}
        if kind is ScalarKind.POINT:
            latitude, longitude = self.value
            return {"latitude": latitude, "longitude": longitude}
        if kind in (ScalarKind.NODE, ScalarKind.EDGE, ScalarKind.PATH):
            return self.value.to_python()
        return self.value


@dataclass
class Column:
    """A single column of a result set."""

    name: str
    kind: ColumnType
    cells: List[Union[Scalar, Node, Relation]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.cells)


@dataclass
class Statistics:
    """Statistics messages returned by RedisGraph for a query."""

    messages: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Union[int, float]]:
        """Parse messages like ``"Nodes created: 2"`` into ``{label: number}``.

        Messages whose value is not numeric are skipped.
        """
        parsed: Dict[str, Union[int, float]] = {}
        for message in self.messages:
            label, sep, rest = message.partition(":")
            tokens = rest.split()
            if not sep or not tokens:
                continue
            token = tokens[0]
            try:
                parsed[label.strip()] = int(token)
            except ValueError:
                try:
                    parsed[label.strip()] = float(token)
                except ValueError:
                    continue
        return parsed

    def get(self, label: str) -> Optional[Union[int, float]]:
        return self.as_dict().get(label)


@dataclass
class ResultSet:
    """A result set returned by RedisGraph in response to a query.

    ``columns`` is empty if the reply did not contain any return values.
    """

    columns: List[Column] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)

    @property
    def num_columns(self) -> int:
        return len(self.columns)

    @property
    def num_rows(self) -> int:
        if not self.columns:
            return 0
        return len(self.columns[0])

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def _cell(self, what: str, row_idx: int, column_idx: int) -> Tuple[Column, Any]:
        if not 0 <= column_idx < len(self.columns):
            raise ClientTypeError(
                f"failed to get {what}: column index out of bounds: "
                f"the len is {len(self.columns)} but the index is {column_idx}"
            )
        column = self.columns[column_idx]
        if not 0 <= row_idx < len(column):
            raise ClientTypeError(
                f"failed to get {what}: row index out of bounds: "
                f"the len is {len(column)} but the index is {row_idx}"
            )
        return column, column.cells[row_idx]

    def get_cell(self, row_idx: int, column_idx: int) -> Scalar:
        """Return the cell at the given position as a scalar.

        Cells of typed node/relation columns are wrapped as NODE/EDGE scalars.
        """
        column, cell = self._cell("cell", row_idx, column_idx)
        if column.kind is ColumnType.NODE:
            return Scalar.node(cell)
        if column.kind is ColumnType.RELATION:
            return Scalar.edge(cell)
        return cell

    def get_scalar(self, row_idx: int, column_idx: int) -> Scalar:
        """Return the scalar at the given position.

        Raises ClientTypeError if the column does not hold scalars or the
        position is out of bounds.
        """
        column, cell = self._cell("scalar", row_idx, column_idx)
        if column.kind is not ColumnType.SCALAR:
            raise ClientTypeError(
                f"failed to get scalar: expected column of scalars, found {column.kind.name}"
            )
        return cell

    def get_node(self, row_idx: int, column_idx: int) -> Node:
        """Return the node at the given position.

        Nodes are found both in node columns and as NODE scalars.
        """
        column, cell = self._cell("node", row_idx, column_idx)
        if column.kind is ColumnType.NODE:
            return cell
        if column.kind is ColumnType.SCALAR:
            if cell.kind is ScalarKind.NODE:
                return cell.value
            raise ClientTypeError(
                f"failed to get node: tried to get node in scalar column, "
                f"but was actually {cell.kind.name}"
            )
        raise ClientTypeError(
            f"failed to get node: expected column of nodes, found {column.kind.name}"
        )

    def get_relation(self, row_idx: int, column_idx: int) -> Relation:
        """Return the relation at the given position."""
        column, cell = self._cell("relation", row_idx, column_idx)
        if column.kind is ColumnType.RELATION:
            return cell
        if column.kind is ColumnType.SCALAR:
            if cell.kind is ScalarKind.EDGE:
                return cell.value
            raise ClientTypeError(
                f"failed to get relation: tried to get edge in scalar column, "
                f"but was actually {cell.kind.name}"
            )
        raise ClientTypeError(
            f"failed to get relation: expected column of relations, found {column.kind.name}"
        )

    def get_path(self, row_idx: int, column_idx: int) -> Path:
        """Return the path at the given position."""
        scalar = self.get_scalar(row_idx, column_idx)
        if scalar.kind is not ScalarKind.PATH:
            raise ClientTypeError(
                f"failed to get path: tried to get path in scalar column, "
                f"but was actually {scalar.kind.name}"
            )
        return scalar.value

    def unique_column_names(self) -> List[str]:
        """Column names with repeats suffixed ``_1``, ``_2``... in column order.

        RedisGraph names a column after its expression, so ``RETURN n.x, n.x``
        has two columns called ``n.x``.
        """
        names: List[str] = []
        taken = set(self.column_names)
        seen: Dict[str, int] = {}
        for name in self.column_names:
            if name not in seen:
                seen[name] = 0
                names.append(name)
                continue
            while True:
                seen[name] += 1
                candidate = f"{name}_{seen[name]}"
                if candidate not in taken:
                    break
            taken.add(candidate)
            names.append(candidate)
        return names

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Return rows as ``{column_name: value}`` dicts of plain Python data.

        Keys come from :meth:`unique_column_names`, so no cell is dropped.
        """
        names = self.unique_column_names()
        records: List[Dict[str, Any]] = []
        for row_idx in range(self.num_rows):
            records.append(
                {
                    name: column.cells[row_idx].to_python()
                    for name, column in zip(names, self.columns)
                }
            )
        return records


__all__ = [
    "ScalarKind",
    "ColumnType",
    "Scalar",
    "Node",
    "Relation",
    "Path",
    "Column",
    "Statistics",
    "ResultSet",
]

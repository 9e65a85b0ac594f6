"""Parsing of ``GRAPH.QUERY ... --compact`` replies.

redis-py hands us the reply as nested lists of ``int`` and ``bytes``. In
compact mode labels, relationship types and property keys are sent as
numeric ids, which are resolved through the graph's name caches (anything
with ``labels``, ``relationship_types`` and ``property_keys`` sequences).
An id missing from a cache raises the matching *NotFoundError so the
caller can refresh that cache and parse again.

Reply layout:

    [header, rows, statistics] | [statistics]
    header     = [[column_type, name], ...]
    rows       = [[cell, ...], ...]
    scalar     = [scalar_type, value]
    node       = [id, [label_id, ...], [property, ...]]
    relation   = [id, type_id, src_id, dst_id, [property, ...]]
    property   = [key_id, scalar_type, value]
    path       = [array-of-nodes scalar, array-of-edges scalar]
    map        = [key, scalar, key, scalar, ...]
    point      = [latitude, longitude]
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol, Sequence

from redis.exceptions import ResponseError

from ..errors import (
    InvalidUtf8Error,
    LabelNotFoundError,
    PropertyKeyNotFoundError,
    RelationshipTypeNotFoundError,
    ServerError,
    ServerTypeError,
)
from ..types import (
    Column,
    ColumnType,
    Node,
    Path,
    Relation,
    ResultSet,
    Scalar,
    ScalarKind,
    Statistics,
)


class GraphMapping(Protocol):
    """Name caches used to resolve ids in compact replies."""

    @property
    def labels(self) -> Sequence[str]: ...

    @property
    def relationship_types(self) -> Sequence[str]: ...

    @property
    def property_keys(self) -> Sequence[str]: ...


def _raise_if_error(value: Any) -> None:
    if isinstance(value, ResponseError):
        raise ServerError(str(value)) from value


def _text(data: Any, what: str) -> str:
    if not isinstance(data, (bytes, str)):
        raise ServerTypeError(f"expected string as {what}")
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(f"{what} is not valid UTF-8") from e


def _list(value: Any, what: str) -> list:
    if not isinstance(value, list):
        raise ServerTypeError(f"expected array as {what} representation")
    return value


def _int(value: Any, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ServerTypeError(f"expected integer as {what}")
    return value


def parse_result_set(value: Any, graph: GraphMapping) -> ResultSet:
    """Parse a full compact reply into a :class:`ResultSet`."""
    _raise_if_error(value)
    values = _list(value, "result set")
    for element in values:
        _raise_if_error(element)

    if len(values) == 1:
        return ResultSet(columns=[], statistics=parse_statistics(values[0]))
    if len(values) != 3:
        raise ServerTypeError("expected array of size 3 or 1 as result set representation")

    header, rows, statistics = values
    header = _list(header, "header row")
    rows = [_list(row, "result row") for row in _list(rows, "result table")]

    for row in rows:
        if len(row) != len(header):
            raise ServerTypeError(
                f"result row has {len(row)} cells but header has {len(header)} columns"
            )

    columns: List[Column] = []
    for i, header_cell in enumerate(header):
        header_cell = _list(header_cell, "header cell")
        if len(header_cell) != 2:
            raise ServerTypeError("expected array of size 2 as header cell representation")
        code = _int(header_cell[0], "column type")
        name = _text(header_cell[1], "column name")
        try:
            kind = ColumnType(code)
        except ValueError:
            raise ServerTypeError(
                f"expected integer between 0 and 3 as column type, got {code}"
            ) from None

        if kind is ColumnType.SCALAR:
            cells: list = [parse_scalar(row[i], graph) for row in rows]
        elif kind is ColumnType.NODE:
            cells = [parse_node(row[i], graph) for row in rows]
        elif kind is ColumnType.RELATION:
            cells = [parse_relation(row[i], graph) for row in rows]
        else:
            raise ServerTypeError("column type is unknown")
        columns.append(Column(name=name, kind=kind, cells=cells))

    return ResultSet(columns=columns, statistics=parse_statistics(statistics))


def parse_statistics(value: Any) -> Statistics:
    entries = _list(value, "statistics list")
    return Statistics([_text(entry, "statistics entry") for entry in entries])


def parse_scalar(value: Any, graph: GraphMapping) -> Scalar:
    """Parse a ``[scalar_type, value]`` pair."""
    pair = _list(value, "scalar")
    if len(pair) != 2:
        raise ServerTypeError("expected array of size 2 as scalar representation")
    code = _int(pair[0], "scalar type")
    raw = pair[1]
    try:
        kind = ScalarKind(code)
    except ValueError:
        raise ServerTypeError(
            f"expected integer between 0 and {int(max(ScalarKind))} (scalar type) "
            f"as first element of scalar array, got {code}"
        ) from None

    if kind is ScalarKind.NIL:
        return Scalar.nil()
    if kind is ScalarKind.STRING:
        if not isinstance(raw, bytes):
            raise ServerTypeError("expected binary data as scalar value (scalar type is string)")
        return Scalar.string(raw)
    if kind is ScalarKind.INTEGER:
        return Scalar.integer(_int(raw, "scalar value (scalar type is integer)"))
    if kind is ScalarKind.BOOLEAN:
        if raw == b"true":
            return Scalar.boolean(True)
        if raw == b"false":
            return Scalar.boolean(False)
        raise ServerTypeError(
            'expected either "true" or "false" as scalar value (scalar type is boolean)'
        )
    if kind is ScalarKind.DOUBLE:
        return Scalar.double(_float(raw, "scalar value (scalar type is double)"))
    if kind is ScalarKind.ARRAY:
        items = _list(raw, "array")
        return Scalar.array([parse_scalar(item, graph) for item in items])
    if kind is ScalarKind.NODE:
        return Scalar.node(parse_node(raw, graph))
    if kind is ScalarKind.EDGE:
        return Scalar.edge(parse_relation(raw, graph))
    if kind is ScalarKind.PATH:
        return Scalar.path(parse_path(raw, graph))
    if kind is ScalarKind.MAP:
        return Scalar.map(parse_map(raw, graph))
    if kind is ScalarKind.POINT:
        point = _list(raw, "point")
        if len(point) != 2:
            raise ServerTypeError("expected array of size 2 as point representation")
        return Scalar.point(_float(point[0], "latitude"), _float(point[1], "longitude"))
    raise ServerTypeError("scalar type is unknown")


def _float(raw: Any, what: str) -> float:
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    text = _text(raw, what)
    try:
        return float(text)
    except ValueError:
        raise ServerTypeError(f"expected string representation of double as {what}") from None


def parse_node(value: Any, graph: GraphMapping) -> Node:
    values = _list(value, "node")
    if len(values) != 3:
        raise ServerTypeError("expected array of size 3 as node representation")
    node_id = _int(values[0], "node ID")

    graph_labels = graph.labels
    labels: List[str] = []
    for label_id in _list(values[1], "label IDs"):
        label_id = _int(label_id, "label ID")
        if not 0 <= label_id < len(graph_labels):
            raise LabelNotFoundError(label_id)
        labels.append(graph_labels[label_id])

    return Node(labels=labels, properties=parse_properties(values[2], graph), id=node_id)


def parse_relation(value: Any, graph: GraphMapping) -> Relation:
    values = _list(value, "relationship")
    if len(values) != 5:
        raise ServerTypeError("expected array of size 5 as relationship representation")
    relation_id = _int(values[0], "relationship ID")
    type_id = _int(values[1], "relationship type ID")
    src_id = _int(values[2], "source node ID")
    dst_id = _int(values[3], "destination node ID")

    relationship_types = graph.relationship_types
    if not 0 <= type_id < len(relationship_types):
        raise RelationshipTypeNotFoundError(type_id)

    return Relation(
        type_name=relationship_types[type_id],
        properties=parse_properties(values[4], graph),
        id=relation_id,
        src_node_id=src_id,
        dst_node_id=dst_id,
    )


def parse_path(value: Any, graph: GraphMapping) -> Path:
    values = _list(value, "path")
    if len(values) != 2:
        raise ServerTypeError("expected array of size 2 as path representation")

    nodes_scalar = parse_scalar(values[0], graph)
    if nodes_scalar.kind is not ScalarKind.ARRAY:
        raise ServerTypeError(f"expected path nodes to be an array, not {nodes_scalar.kind.name}")
    nodes: List[Node] = []
    for item in nodes_scalar.value:
        if item.kind is not ScalarKind.NODE:
            raise ServerTypeError(f"unexpected non-node in path nodes array, {item.kind.name}")
        nodes.append(item.value)

    edges_scalar = parse_scalar(values[1], graph)
    if edges_scalar.kind is not ScalarKind.ARRAY:
        raise ServerTypeError(f"expected path edges to be an array, not {edges_scalar.kind.name}")
    edges: List[Relation] = []
    for item in edges_scalar.value:
        if item.kind is not ScalarKind.EDGE:
            raise ServerTypeError(f"unexpected non-edge in path edges array, {item.kind.name}")
        edges.append(item.value)

    return Path(nodes=nodes, edges=edges)


def parse_map(value: Any, graph: GraphMapping) -> Dict[str, Scalar]:
    values = _list(value, "map")
    if len(values) % 2:
        raise ServerTypeError("expected even number of elements as map representation")
    return {
        _text(values[i], "map key"): parse_scalar(values[i + 1], graph)
        for i in range(0, len(values), 2)
    }


def parse_properties(value: Any, graph: GraphMapping) -> Dict[str, Scalar]:
    property_keys = graph.property_keys
    properties: Dict[str, Scalar] = {}
    for prop in _list(value, "properties"):
        prop = _list(prop, "property")
        if len(prop) != 3:
            raise ServerTypeError("expected array of size 3 as property representation")
        key_id = _int(prop[0], "property key ID")
        if not 0 <= key_id < len(property_keys):
            raise PropertyKeyNotFoundError(key_id)
        properties[property_keys[key_id]] = parse_scalar([prop[1], prop[2]], graph)
    return properties


def parse_mapping(value: Any, graph: GraphMapping) -> List[str]:
    """Read the first column of strings from a ``CALL db.*()`` reply."""
    result_set = parse_result_set(value, graph)
    if not result_set.columns:
        raise ServerTypeError("expected at least one column in mapping result set")
    column = result_set.columns[0]
    if column.kind is not ColumnType.SCALAR:
        raise ServerTypeError("expected scalars as first column in result set")
    names: List[str] = []
    for scalar in column.cells:
        if scalar.kind is not ScalarKind.STRING:
            raise ServerTypeError("expected strings in first column of result set")
        names.append(_text(scalar.value, "mapping entry"))
    return names

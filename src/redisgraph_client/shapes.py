"""Typed decoding of result sets.

A *shape* describes what the caller wants out of a :class:`ResultSet`.
There are three levels, each building on the one below:

- cell types convert one cell (``STRING``, ``INTEGER``, ``Nullable(FLOAT)``...)
- row shapes convert one row (``Record(STRING, INTEGER)``); every cell type
  is also a row shape reading column 0
- table shapes convert the whole result set (``Rows(...)``,
  ``RESULT_SET``); every row shape is also a table shape reading row 0

So a single query call can return a scalar, a tuple or a list depending on
the shape passed in::

    graph.query("RETURN 42", INTEGER)                       # 42
    graph.query("RETURN 'a', 1", Record(STRING, INTEGER))   # ("a", 1)
    graph.query("MATCH (n) RETURN n.x", Rows(INTEGER))      # [1, 2, 3]

Decoding is pure: the same result set and shape always give the same value
or the same error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from .errors import (
    ColumnCountMismatchError,
    InvalidUtf8Error,
    NoResultsError,
    TypeMismatchError,
)
from .types import Node, Path, Relation, ResultSet, Scalar, ScalarKind


class TableShape(ABC):
    """Implemented by shapes that can be constructed from a whole result set."""

    @abstractmethod
    def from_table(self, result_set: ResultSet) -> Any:
        ...


class RowShape(TableShape):
    """Implemented by shapes that can be constructed from one row.

    Used as a table shape, a row shape decodes the first row. The column
    count is checked against the header first, then NoResultsError is
    raised when there is no row to decode. A reply without a header (a pure
    mutation) has nothing to check and fails with NoResultsError.
    """

    @property
    @abstractmethod
    def arity(self) -> int:
        ...

    @abstractmethod
    def from_row(self, result_set: ResultSet, row_idx: int) -> Any:
        ...

    def check_columns(self, result_set: ResultSet) -> None:
        if result_set.num_columns != self.arity:
            raise ColumnCountMismatchError(self.arity, result_set.num_columns)

    def from_table(self, result_set: ResultSet) -> Any:
        if result_set.num_columns == 0:
            raise NoResultsError()
        self.check_columns(result_set)
        if result_set.num_rows == 0:
            raise NoResultsError()
        return self.from_row(result_set, 0)


class CellType(RowShape):
    """Implemented by types that can be constructed from a single cell.

    Subclasses implement :meth:`convert`, which maps a raw scalar to a Python
    value or raises TypeMismatchError.
    """

    name: str = "cell"

    @property
    def arity(self) -> int:
        return 1

    def from_row(self, result_set: ResultSet, row_idx: int) -> Any:
        return self.from_cell(result_set, row_idx, 0)

    def from_cell(self, result_set: ResultSet, row_idx: int, column_idx: int) -> Any:
        scalar = result_set.get_cell(row_idx, column_idx)
        return self.convert(scalar, row=row_idx, column=column_idx)

    @abstractmethod
    def convert(
        self, scalar: Scalar, *, row: Optional[int] = None, column: Optional[int] = None
    ) -> Any:
        ...

    def mismatch(
        self,
        scalar: Scalar,
        *,
        row: Optional[int] = None,
        column: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> TypeMismatchError:
        return TypeMismatchError(
            self.name, scalar.kind.name, row=row, column=column, detail=detail
        )

    def __repr__(self) -> str:
        return self.name


class _KindCell(CellType):
    """Passes the value of one scalar kind through unchanged."""

    def __init__(self, kind: ScalarKind, name: str) -> None:
        self.kind = kind
        self.name = name

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is not self.kind:
            raise self.mismatch(scalar, row=row, column=column)
        return scalar.value


class String(CellType):
    name = "STRING"

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is not ScalarKind.STRING:
            raise self.mismatch(scalar, row=row, column=column)
        try:
            return scalar.value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidUtf8Error(
                f"string at row {row}, column {column} is not valid UTF-8"
            ) from e


class Integer(CellType):
    """An integer with a fixed bit width.

    Only INTEGER cells are accepted: DOUBLE cells are rejected even when
    their value is integral, and values outside the target range fail.
    """

    def __init__(self, bits: int = 64, signed: bool = True) -> None:
        if bits not in (8, 16, 32, 64):
            raise ValueError(f"unsupported integer width: {bits}")
        self.bits = bits
        self.signed = signed
        self.name = f"{'INT' if signed else 'UINT'}{bits}"
        if signed:
            self.min_value = -(2 ** (bits - 1))
            self.max_value = 2 ** (bits - 1) - 1
        else:
            self.min_value = 0
            self.max_value = 2**bits - 1

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is not ScalarKind.INTEGER:
            raise self.mismatch(scalar, row=row, column=column)
        value = scalar.value
        if not self.min_value <= value <= self.max_value:
            raise self.mismatch(
                scalar,
                row=row,
                column=column,
                detail=f"value {value} out of range [{self.min_value}, {self.max_value}]",
            )
        return value


class Float(CellType):
    """A double; INTEGER cells are widened."""

    name = "FLOAT"

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is ScalarKind.DOUBLE:
            return scalar.value
        if scalar.kind is ScalarKind.INTEGER:
            return float(scalar.value)
        raise self.mismatch(scalar, row=row, column=column)


class Nil(CellType):
    """Accepts only NIL, e.g. for ``RETURN null``."""

    name = "NIL"

    def convert(self, scalar, *, row=None, column=None):
        if not scalar.is_nil:
            raise self.mismatch(scalar, row=row, column=column)
        return None


class AnyScalar(CellType):
    """Returns the raw :class:`Scalar` unchanged."""

    name = "SCALAR"

    def convert(self, scalar, *, row=None, column=None):
        return scalar


class Native(CellType):
    """Any cell, rendered as plain Python data (see ``Scalar.to_python``)."""

    name = "NATIVE"

    def convert(self, scalar, *, row=None, column=None):
        return scalar.to_python()


class Point(CellType):
    name = "POINT"

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is not ScalarKind.POINT:
            raise self.mismatch(scalar, row=row, column=column)
        return scalar.value


class Nullable(CellType):
    """Wraps another cell type so that NIL decodes to ``None``."""

    def __init__(self, inner: CellType) -> None:
        self.inner = inner
        self.name = f"Nullable({inner.name})"

    def convert(self, scalar, *, row=None, column=None):
        if scalar.is_nil:
            return None
        return self.inner.convert(scalar, row=row, column=column)


class ListOf(CellType):
    """An ARRAY cell whose elements are each converted with ``inner``."""

    def __init__(self, inner: CellType) -> None:
        self.inner = inner
        self.name = f"ListOf({inner.name})"

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is not ScalarKind.ARRAY:
            raise self.mismatch(scalar, row=row, column=column)
        return [self.inner.convert(item, row=row, column=column) for item in scalar.value]


class MapOf(CellType):
    """A MAP cell whose values are each converted with ``inner``."""

    def __init__(self, inner: CellType) -> None:
        self.inner = inner
        self.name = f"MapOf({inner.name})"

    def convert(self, scalar, *, row=None, column=None):
        if scalar.kind is not ScalarKind.MAP:
            raise self.mismatch(scalar, row=row, column=column)
        return {
            key: self.inner.convert(value, row=row, column=column)
            for key, value in scalar.value.items()
        }


class Record(RowShape):
    """A fixed-arity record, one cell type per column.

    Decodes to a tuple, or to ``into(*values)`` when ``into`` is given
    (a namedtuple or dataclass, for example).
    """

    def __init__(self, *cells: CellType, into: Optional[Callable[..., Any]] = None) -> None:
        if not cells:
            raise ValueError("Record needs at least one cell type")
        for cell in cells:
            if not isinstance(cell, CellType):
                raise TypeError(f"Record fields must be cell types, got {cell!r}")
        self.cells = cells
        self.into = into

    @property
    def arity(self) -> int:
        return len(self.cells)

    def from_row(self, result_set: ResultSet, row_idx: int) -> Any:
        self.check_columns(result_set)
        values = tuple(
            cell.from_cell(result_set, row_idx, column_idx)
            for column_idx, cell in enumerate(self.cells)
        )
        if self.into is not None:
            return self.into(*values)
        return values

    def __repr__(self) -> str:
        return f"Record({', '.join(repr(cell) for cell in self.cells)})"


class Rows(TableShape):
    """Every row of the result, in order, decoded with ``row``.

    The column count is checked once against the header, so a mismatch
    fails even when there are no rows. A reply without a header (a pure
    mutation) decodes to an empty list.
    """

    def __init__(self, row: RowShape) -> None:
        if not isinstance(row, RowShape):
            raise TypeError(f"Rows needs a row shape, got {row!r}")
        self.row = row

    def from_table(self, result_set: ResultSet) -> List[Any]:
        if result_set.num_columns == 0:
            return []
        self.row.check_columns(result_set)
        return [self.row.from_row(result_set, i) for i in range(result_set.num_rows)]

    def __repr__(self) -> str:
        return f"Rows({self.row!r})"


class _ResultSetShape(TableShape):
    def from_table(self, result_set: ResultSet) -> ResultSet:
        return result_set

    def __repr__(self) -> str:
        return "RESULT_SET"


class _NodeCell(CellType):
    name = "NODE"

    def convert(self, scalar, *, row=None, column=None) -> Node:
        if scalar.kind is not ScalarKind.NODE:
            raise self.mismatch(scalar, row=row, column=column)
        return scalar.value


class _RelationCell(CellType):
    name = "RELATION"

    def convert(self, scalar, *, row=None, column=None) -> Relation:
        if scalar.kind is not ScalarKind.EDGE:
            raise self.mismatch(scalar, row=row, column=column)
        return scalar.value


class _PathCell(CellType):
    name = "PATH"

    def convert(self, scalar, *, row=None, column=None) -> Path:
        if scalar.kind is not ScalarKind.PATH:
            raise self.mismatch(scalar, row=row, column=column)
        return scalar.value


STRING = String()
BYTES = _KindCell(ScalarKind.STRING, "BYTES")
BOOLEAN = _KindCell(ScalarKind.BOOLEAN, "BOOLEAN")
INT8 = Integer(8)
INT16 = Integer(16)
INT32 = Integer(32)
INT64 = Integer(64)
UINT8 = Integer(8, signed=False)
UINT16 = Integer(16, signed=False)
UINT32 = Integer(32, signed=False)
UINT64 = Integer(64, signed=False)
INTEGER = INT64
FLOAT = Float()
NIL = Nil()
SCALAR = AnyScalar()
NATIVE = Native()
POINT = Point()
NODE = _NodeCell()
RELATION = _RelationCell()
PATH = _PathCell()
RESULT_SET = _ResultSetShape()


def decode(result_set: ResultSet, shape: TableShape) -> Any:
    """Convert ``result_set`` into the value described by ``shape``."""
    return shape.from_table(result_set)


__all__ = [
    "TableShape",
    "RowShape",
    "CellType",
    "String",
    "Integer",
    "Float",
    "Nil",
    "AnyScalar",
    "Native",
    "Point",
    "Nullable",
    "ListOf",
    "MapOf",
    "Record",
    "Rows",
    "STRING",
    "BYTES",
    "BOOLEAN",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "INTEGER",
    "FLOAT",
    "NIL",
    "SCALAR",
    "NATIVE",
    "POINT",
    "NODE",
    "RELATION",
    "PATH",
    "RESULT_SET",
    "decode",
]

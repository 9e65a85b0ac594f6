"""Exception hierarchy for the RedisGraph client.

Every error raised by this package derives from :class:`RedisGraphError`,
so callers can catch the whole family with a single ``except`` clause.

Two broad groups exist:

- server side: the reply could not be obtained or did not follow the
  ``--compact`` protocol (:class:`ServerError`, :class:`ServerTypeError`)
- client side: the reply was fine but could not be mapped to the shape the
  caller asked for (:class:`ClientTypeError` and its subclasses)
"""

from __future__ import annotations

from typing import Optional


class RedisGraphError(Exception):
    """Base exception for all RedisGraph client errors."""


class ServerError(RedisGraphError):
    """The Redis server rejected the command or the connection failed."""


class ServerTypeError(RedisGraphError):
    """The server reply did not have the expected structure."""


class MappingNotFoundError(ServerTypeError):
    """A numeric id in the reply is missing from the graph's name cache."""

    def __init__(self, kind: str, id: int) -> None:
        super().__init__(f"{kind} id {id} not found in graph mapping")
        self.kind = kind
        self.id = id


class LabelNotFoundError(MappingNotFoundError):
    def __init__(self, id: int) -> None:
        super().__init__("label", id)


class RelationshipTypeNotFoundError(MappingNotFoundError):
    def __init__(self, id: int) -> None:
        super().__init__("relationship type", id)


class PropertyKeyNotFoundError(MappingNotFoundError):
    def __init__(self, id: int) -> None:
        super().__init__("property key", id)


class InvalidUtf8Error(RedisGraphError):
    """A byte string could not be decoded as UTF-8 where text was required."""


class ClientTypeError(RedisGraphError):
    """The result set could not be converted to the requested shape."""


class NoResultsError(ClientTypeError):
    """The query returned no rows but at least one was required."""

    def __init__(self, message: str = "query returned no rows") -> None:
        super().__init__(message)


class TypeMismatchError(ClientTypeError):
    """A cell's raw kind cannot be converted to the requested type."""

    def __init__(
        self,
        expected: str,
        actual: str,
        *,
        row: Optional[int] = None,
        column: Optional[int] = None,
        detail: Optional[str] = None,
    ) -> None:
        message = f"expected {expected}, found {actual}"
        if row is not None and column is not None:
            message += f" at row {row}, column {column}"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.expected = expected
        self.actual = actual
        self.row = row
        self.column = column


class ColumnCountMismatchError(ClientTypeError):
    """The requested record arity disagrees with the result's column count."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            f"failed to construct record: record has {expected} entries "
            f"but result table has {actual} columns"
        )
        self.expected = expected
        self.actual = actual


__all__ = [
    "RedisGraphError",
    "ServerError",
    "ServerTypeError",
    "MappingNotFoundError",
    "LabelNotFoundError",
    "RelationshipTypeNotFoundError",
    "PropertyKeyNotFoundError",
    "InvalidUtf8Error",
    "ClientTypeError",
    "NoResultsError",
    "TypeMismatchError",
    "ColumnCountMismatchError",
]

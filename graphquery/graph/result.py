"""QueryResult: the tagged outcome of every client operation."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import QueryError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """Success value or the error that prevented it.

    Attributes:
        ok: Whether the operation succeeded.
        value: Result on success, ``None`` otherwise.
        error: ``AdapterError`` or ``ProjectionError`` on failure.
    """

    ok: bool
    value: T | None = None
    error: QueryError | None = None

    @classmethod
    def success(cls, value: T) -> "QueryResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: QueryError) -> "QueryResult[T]":
        return cls(ok=False, error=error)

    @property
    def source(self) -> str | None:
        """``"adapter"`` or ``"projection"`` for failures, ``None`` on success."""
        return self.error.source if self.error is not None else None

    def map(self, func: Callable[[T], U]) -> "QueryResult[U]":
        if not self.ok:
            return QueryResult(ok=False, error=self.error)
        return QueryResult.success(func(self.value))

    def unwrap(self) -> T:
        return unwrap(self)

    def __iter__(self):
        # Allows ``ok, value = client.query(...)`` style destructuring
        yield self.ok
        yield self.value if self.ok else self.error


def unwrap(result: QueryResult[T]) -> T:
    """Return the success value or raise the carried error.

    Shared by every ``*_or_raise`` operation.
    """
    if result.ok:
        return result.value
    if result.error is None:
        raise QueryError("Query failed without an error")
    raise result.error

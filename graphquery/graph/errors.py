"""Error taxonomy for graph queries."""

from typing import Any


class QueryError(Exception):
    """Base exception for every failure surfaced by the graph client."""

    source = "query"


class AdapterError(QueryError):
    """The backend could not execute the statement."""

    source = "adapter"


class Unreachable(AdapterError):
    """Connection refused, timed out or dropped."""

    pass


class RejectedByBackend(AdapterError):
    """The backend reported an error for the statement."""

    def __init__(self, message: str, code: str | None = None):
        super().__init__(f"{code}: {message}" if code else message)
        self.message = message
        self.code = code


class MalformedResponse(AdapterError):
    """The backend answered with data the adapter cannot decode."""

    pass


class ProjectionError(QueryError):
    """Rows came back but did not fit the declared return shape."""

    source = "projection"


class ShapeMismatch(ProjectionError):
    """A value cannot be wrapped as the requested entity."""

    def __init__(self, column: str, value: Any):
        super().__init__(
            f"Column '{column}' holds {type(value).__name__}, not an entity-shaped value"
        )
        self.column = column
        self.value = value


class DecodeFailed(ProjectionError):
    """A registered decoder raised while decoding an entity."""

    def __init__(self, labels: tuple[str, ...], cause: BaseException):
        super().__init__(f"Decoding {':'.join(labels)} failed: {cause}")
        self.labels = labels
        self.cause = cause


class InvalidTarget(ProjectionError):
    """The declared labels cannot form a projection target."""

    def __init__(self, labels: Any, reason: str):
        super().__init__(f"Invalid target {labels!r}: {reason}")
        self.labels = labels
        self.reason = reason

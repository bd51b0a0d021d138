"""Statements, projection and the graph client facade."""

from .client import GraphClient, get_graph_client
from .entity import Edge, EntityKind, Node
from .errors import (
    AdapterError,
    DecodeFailed,
    InvalidTarget,
    MalformedResponse,
    ProjectionError,
    QueryError,
    RejectedByBackend,
    ShapeMismatch,
    Unreachable,
)
from .projection import MISSING, DecoderRegistry, ProjectionEngine
from .result import QueryResult, unwrap
from .statement import Statement, new_statement, render, with_return
from .targets import ANONYMOUS, RAW, TypedEntity

__all__ = [
    "ANONYMOUS",
    "AdapterError",
    "DecodeFailed",
    "InvalidTarget",
    "DecoderRegistry",
    "Edge",
    "EntityKind",
    "GraphClient",
    "MISSING",
    "MalformedResponse",
    "Node",
    "ProjectionEngine",
    "ProjectionError",
    "QueryError",
    "QueryResult",
    "RAW",
    "RejectedByBackend",
    "ShapeMismatch",
    "Statement",
    "TypedEntity",
    "Unreachable",
    "get_graph_client",
    "new_statement",
    "render",
    "unwrap",
    "with_return",
]

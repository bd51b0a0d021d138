"""Thin graph query access layer with typed result projection."""

# Order matters: the adapters import from graphquery.graph
from .graph import (
    ANONYMOUS,
    MISSING,
    RAW,
    AdapterError,
    DecodeFailed,
    DecoderRegistry,
    Edge,
    EntityKind,
    GraphClient,
    InvalidTarget,
    MalformedResponse,
    Node,
    ProjectionEngine,
    ProjectionError,
    QueryError,
    QueryResult,
    RejectedByBackend,
    ShapeMismatch,
    Statement,
    TypedEntity,
    Unreachable,
    get_graph_client,
    new_statement,
    render,
    unwrap,
    with_return,
)
from .adapters import BaseAdapter, BoltAdapter, HttpAdapter, InMemoryAdapter, create_adapter

__version__ = "0.1.0"

__all__ = [
    "ANONYMOUS",
    "AdapterError",
    "BaseAdapter",
    "BoltAdapter",
    "DecodeFailed",
    "DecoderRegistry",
    "Edge",
    "EntityKind",
    "GraphClient",
    "HttpAdapter",
    "InMemoryAdapter",
    "InvalidTarget",
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
    "create_adapter",
    "get_graph_client",
    "new_statement",
    "render",
    "unwrap",
    "with_return",
]

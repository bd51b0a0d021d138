"""Graph client facade binding one adapter to the projection engine."""

import logging
from collections.abc import Callable
from typing import Any

from config.settings import Settings, get_settings
from graphquery.adapters import BaseAdapter, create_adapter

from .entity import EntityKind
from .errors import InvalidTarget, MalformedResponse, QueryError
from .projection import DecoderRegistry, ProjectionEngine
from .queries import Properties, count_statement, exists_statement, get_statement
from .result import QueryResult, unwrap
from .statement import Statement

logger = logging.getLogger(__name__)

PostProcessor = Callable[[list[Any]], Any]


class GraphClient:
    """Entry point for running statements and projecting their results.

    The adapter is fixed for the lifetime of the client. The client keeps no
    mutable state of its own, so it can be shared between threads whenever
    the adapter can.
    """

    def __init__(
        self,
        adapter: BaseAdapter | None = None,
        settings: Settings | None = None,
        decoders: DecoderRegistry | None = None,
    ):
        """Initialize the graph client.

        Args:
            adapter: Backend adapter. Built from settings if not provided.
            settings: Application settings. Uses default if not provided.
            decoders: Decoder registry for typed return columns.
        """
        self._settings = settings or (adapter.settings if adapter else get_settings())
        self._adapter = adapter or create_adapter(self._settings)
        self._engine = ProjectionEngine(decoders)

    @property
    def adapter(self) -> BaseAdapter:
        return self._adapter

    @property
    def decoders(self) -> DecoderRegistry:
        return self._engine.decoders

    def close(self):
        """Close the adapter."""
        self._adapter.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def verify_connectivity(self) -> bool:
        return self._adapter.verify_connectivity()

    def query(
        self,
        statement: Statement | str,
        post: PostProcessor | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> QueryResult:
        """Run a statement and project its rows.

        Raw text has no return specification, so its rows come back as the
        adapter produced them.

        Args:
            statement: ``Statement`` or Cypher text.
            post: Optional function applied to the whole projected list; its
                return value becomes the result value.
            parameters: Extra parameters, merged over the statement's own.

        Returns:
            QueryResult carrying the rows (or ``post``'s value) or the error.
        """
        if isinstance(statement, Statement):
            text, params = statement.render()
            returns = statement.returns
        else:
            text, params, returns = statement, {}, ()
        if parameters:
            params = {**params, **parameters}

        if self._settings.LOG_STATEMENTS:
            logger.debug(f"Running statement via {self._adapter.name}:\n{text}")

        try:
            rows = self._adapter.run(text, params)
            projected = self._engine.project(rows, returns)
        except QueryError as e:
            logger.warning(f"Graph query failed ({e.source}): {e}")
            return QueryResult.failure(e)

        return QueryResult.success(post(projected) if post is not None else projected)

    def query_or_raise(
        self,
        statement: Statement | str,
        post: PostProcessor | None = None,
        parameters: dict[str, Any] | None = None,
    ) -> Any:
        """Same as ``query`` but returns the value or raises the QueryError."""
        return unwrap(self.query(statement, post, parameters))

    def count(self, matcher: Statement | str, variable: str = "x") -> QueryResult:
        """Count elements matching a pattern, e.g. ``count("(x:Disease)")``.

        Returns:
            QueryResult carrying an int.
        """
        result = self.query(count_statement(matcher, variable))
        if not result.ok:
            return result
        try:
            return QueryResult.success(_first_count(result.value))
        except MalformedResponse as e:
            return QueryResult.failure(e)

    def exists(self, matcher: Statement | str, variable: str = "x") -> bool:
        """Whether at least one element matches the pattern.

        Raises:
            QueryError: If the query itself failed; failures are never False.
        """
        return unwrap(self.query(exists_statement(matcher, variable), lambda rows: len(rows) > 0))

    def get(
        self,
        kind: EntityKind | str | type,
        labels: Any,
        properties: Properties = None,
    ) -> QueryResult:
        """Fetch nodes or edges by label(s) and optional property filter.

        Args:
            kind: ``EntityKind``, ``"node"``/``"edge"`` or the Node/Edge class.
            labels: Labels (node) or relationship types (edge); strings or classes.
            properties: Mapping or sequence of ``(key, value)`` pairs to match.

        Returns:
            QueryResult carrying a list of entities (or decoded values).
        """
        try:
            statement = get_statement(kind, labels, properties)
        except InvalidTarget as e:
            logger.warning(f"Cannot build get statement: {e}")
            return QueryResult.failure(e)
        column = statement.returns[0][0]
        return self.query(statement, lambda rows: [row[column] for row in rows])

    def get_or_raise(
        self,
        kind: EntityKind | str | type,
        labels: Any,
        properties: Properties = None,
    ) -> list[Any]:
        return unwrap(self.get(kind, labels, properties))


def _first_count(rows: list[dict[str, Any]]) -> int:
    if not rows:
        return 0
    try:
        return int(rows[0]["count"])
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Count result has no usable 'count' column: {rows[0]!r}") from e


# Singleton instance
_client: GraphClient | None = None


def get_graph_client() -> GraphClient:
    """Get the graph client singleton built from settings."""
    global _client
    if _client is None:
        _client = GraphClient()
    return _client

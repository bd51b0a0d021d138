"""Neo4j adapter over the Bolt protocol using the official driver."""

import logging
from typing import Any

from neo4j import GraphDatabase
from neo4j.exceptions import (
    DriverError,
    Neo4jError,
    ServiceUnavailable,
    SessionExpired,
)
from neo4j.graph import Node as Neo4jNode
from neo4j.graph import Path, Relationship

from config.settings import Settings
from graphquery.graph.entity import Edge, Node
from graphquery.graph.errors import MalformedResponse, RejectedByBackend, Unreachable

from .base import BaseAdapter

logger = logging.getLogger(__name__)


def _convert(value: Any) -> Any:
    """Turn driver graph types into entity payloads, recursively."""
    if isinstance(value, Neo4jNode):
        return Node(tuple(sorted(value.labels)), dict(value.items()), value.element_id)
    if isinstance(value, Relationship):
        return Edge(
            value.type,
            dict(value.items()),
            value.start_node.element_id if value.start_node is not None else None,
            value.end_node.element_id if value.end_node is not None else None,
            value.element_id,
        )
    if isinstance(value, Path):
        return {
            "nodes": [_convert(n) for n in value.nodes],
            "relationships": [_convert(r) for r in value.relationships],
        }
    if isinstance(value, dict):
        return {str(k): _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    return value


def encode_parameter(value: Any) -> Any:
    """Entities passed as parameters travel as their property maps."""
    if isinstance(value, (Node, Edge)):
        return dict(value.properties)
    if isinstance(value, dict):
        return {k: encode_parameter(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_parameter(v) for v in value]
    return value


class BoltAdapter(BaseAdapter):
    """Runs statements through a pooled ``neo4j`` driver."""

    name = "bolt"

    def __init__(self, settings: Settings | None = None):
        """Initialize the Bolt adapter.

        The driver connects lazily, so construction never touches the network.

        Args:
            settings: Application settings. Uses default if not provided.
        """
        super().__init__(settings)
        self._database = self._settings.NEO4J_DATABASE
        self._driver = GraphDatabase.driver(
            self._settings.NEO4J_URI,
            auth=(self._settings.NEO4J_USER, self._settings.NEO4J_PASSWORD),
            max_connection_lifetime=3600,
            max_connection_pool_size=self._settings.MAX_CONNECTION_POOL_SIZE,
            connection_acquisition_timeout=self._settings.CONNECTION_TIMEOUT_SECONDS,
        )

    @property
    def driver(self):
        return self._driver

    def close(self) -> None:
        """Close the driver connection pool."""
        self._driver.close()

    def _execute(self, statement: str, parameters: dict[str, Any]) -> list[dict[str, Any]]:
        params = encode_parameter(parameters)
        try:
            with self._driver.session(database=self._database) as session:
                result = session.run(statement, params)
                records = list(result)
        except (ServiceUnavailable, SessionExpired) as e:
            raise Unreachable(f"Neo4j unreachable at {self._settings.NEO4J_URI}: {e}") from e
        except Neo4jError as e:
            code = getattr(e, "code", None)
            logger.warning(f"Neo4j rejected statement: {code}")
            raise RejectedByBackend(getattr(e, "message", None) or str(e), code) from e
        except DriverError as e:
            raise Unreachable(f"Neo4j driver error: {e}") from e

        try:
            return [
                {str(key): _convert(value) for key, value in zip(record.keys(), record.values())}
                for record in records
            ]
        except (TypeError, ValueError, AttributeError) as e:
            raise MalformedResponse(f"Cannot decode Neo4j record: {e}") from e

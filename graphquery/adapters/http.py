"""Neo4j adapter over the transactional HTTP endpoint."""

import json
import logging
from datetime import date, datetime, time
from typing import Any

import httpx

from config.settings import Settings
from graphquery.graph.entity import Edge, Node
from graphquery.graph.errors import MalformedResponse, RejectedByBackend, Unreachable

from .base import BaseAdapter

logger = logging.getLogger(__name__)

RESULT_CONTENTS = ["row", "graph"]


def _json_default(value: Any) -> Any:
    if isinstance(value, (Node, Edge)):
        return dict(value.properties)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Cannot send {type(value).__name__} as a parameter")


def _graph_index(graph: dict[str, Any]) -> tuple[dict[str, dict], dict[str, dict]]:
    def key(item: dict[str, Any]) -> str:
        return str(item.get("elementId", item.get("id")))

    nodes = {key(n): n for n in graph.get("nodes", [])}
    relationships = {key(r): r for r in graph.get("relationships", [])}
    return nodes, relationships


def _is_path(meta: list[Any]) -> bool:
    if len(meta) < 3 or len(meta) % 2 == 0:
        return False
    expected = ("node", "relationship")
    return all(isinstance(m, dict) and m.get("type") == expected[i % 2] for i, m in enumerate(meta))


def _entity(value: Any, meta: Any, nodes: dict[str, dict], relationships: dict[str, dict]) -> Any:
    """Rebuild node and edge payloads in a row value, following its meta.

    Lists and maps carry a list of metas, one per element, and are walked
    recursively. A path comes back as alternating node and relationship
    metas and is reshaped to ``{"nodes": [...], "relationships": [...]}``.
    """
    if isinstance(meta, list) and isinstance(value, (list, dict)):
        items = list(value.values()) if isinstance(value, dict) else value
        if len(items) != len(meta):
            return value
        converted = [_entity(v, m, nodes, relationships) for v, m in zip(items, meta)]
        if isinstance(value, dict):
            return dict(zip(value.keys(), converted))
        if _is_path(meta):
            return {"nodes": converted[0::2], "relationships": converted[1::2]}
        return converted
    if not isinstance(meta, dict) or not isinstance(value, dict):
        return value

    element_id = str(meta.get("elementId", meta.get("id")))
    if meta.get("type") == "node":
        node = nodes.get(element_id, {})
        return Node(tuple(node.get("labels", ())), value, element_id)
    if meta.get("type") == "relationship":
        rel = relationships.get(element_id)
        if rel is None:
            return value
        return Edge(
            rel["type"],
            value,
            str(rel.get("startNodeElementId", rel.get("startNode"))),
            str(rel.get("endNodeElementId", rel.get("endNode"))),
            element_id,
        )
    return value


def decode_result(payload: Any) -> list[dict[str, Any]]:
    """Decode one transactional endpoint response body into rows.

    Raises:
        RejectedByBackend: The response carries backend errors.
        MalformedResponse: The body does not have the expected structure.
    """
    if not isinstance(payload, dict) or "results" not in payload:
        raise MalformedResponse("Response body has no 'results' section")

    errors = payload.get("errors") or []
    if errors:
        first = errors[0]
        raise RejectedByBackend(first.get("message", "Unknown error"), first.get("code"))

    if not payload["results"]:
        return []

    try:
        result = payload["results"][0]
        columns = [str(c) for c in result["columns"]]
        rows = []
        for entry in result["data"]:
            values = entry["row"]
            metas = entry.get("meta") or [None] * len(values)
            if len(metas) != len(values):
                metas = [None] * len(values)
            nodes, relationships = _graph_index(entry.get("graph") or {})
            rows.append(
                {
                    column: _entity(value, meta, nodes, relationships)
                    for column, value, meta in zip(columns, values, metas)
                }
            )
        return rows
    except (KeyError, TypeError, IndexError) as e:
        raise MalformedResponse(f"Unexpected response structure: {e}") from e


class HttpAdapter(BaseAdapter):
    """Posts statements to ``/db/{database}/tx/commit`` with httpx."""

    name = "http"

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the HTTP adapter.

        Args:
            settings: Application settings. Uses default if not provided.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        """
        super().__init__(settings)
        self._url = self._settings.transaction_url
        self._client = httpx.Client(
            auth=(self._settings.NEO4J_USER, self._settings.NEO4J_PASSWORD),
            timeout=self._settings.CONNECTION_TIMEOUT_SECONDS,
            headers={"Accept": "application/json;charset=UTF-8"},
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _execute(self, statement: str, parameters: dict[str, Any]) -> list[dict[str, Any]]:
        body = {
            "statements": [
                {
                    "statement": statement,
                    "parameters": parameters,
                    "resultDataContents": RESULT_CONTENTS,
                }
            ]
        }
        content = json.dumps(body, default=_json_default)

        try:
            response = self._client.post(
                self._url,
                content=content,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TransportError as e:
            raise Unreachable(f"Neo4j HTTP endpoint unreachable at {self._url}: {e}") from e

        if response.status_code >= 500:
            raise Unreachable(f"Neo4j HTTP endpoint returned {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            if response.status_code >= 400:
                raise RejectedByBackend(response.text, f"HTTP {response.status_code}") from e
            raise MalformedResponse(f"Response is not JSON: {e}") from e

        if response.status_code >= 400 and not (isinstance(payload, dict) and payload.get("errors")):
            raise RejectedByBackend(response.text, f"HTTP {response.status_code}")

        rows = decode_result(payload)
        logger.debug(f"HTTP adapter received {len(rows)} rows")
        return rows

"""In-memory adapter with scripted responses for tests and local development."""

import copy
import logging
import threading
from dataclasses import dataclass
from typing import Any

from config.settings import Settings
from graphquery.graph.errors import AdapterError

from .base import BaseAdapter

logger = logging.getLogger(__name__)


@dataclass
class ScriptedResponse:
    """Rows or an error returned when a statement contains ``match``."""

    match: str | None
    rows: list[dict[str, Any]] | None = None
    error: AdapterError | None = None
    once: bool = False


class InMemoryAdapter(BaseAdapter):
    """Answers statements from a script instead of a database.

    Responses are checked in registration order; the first one whose
    ``match`` substring occurs in the statement text (or that has no
    ``match``) wins. Statements with no scripted response return no rows.
    Every call is recorded in ``runs``.
    """

    name = "memory"

    def __init__(self, settings: Settings | None = None):
        super().__init__(settings)
        self._responses: list[ScriptedResponse] = []
        self._runs: list[tuple[str, dict[str, Any]]] = []
        self._lock = threading.Lock()

    @property
    def runs(self) -> list[tuple[str, dict[str, Any]]]:
        with self._lock:
            return list(self._runs)

    def add_response(
        self,
        rows: list[dict[str, Any]],
        match: str | None = None,
        once: bool = False,
    ) -> "InMemoryAdapter":
        with self._lock:
            self._responses.append(ScriptedResponse(match, rows=rows, once=once))
        return self

    def add_error(
        self,
        error: AdapterError,
        match: str | None = None,
        once: bool = False,
    ) -> "InMemoryAdapter":
        with self._lock:
            self._responses.append(ScriptedResponse(match, error=error, once=once))
        return self

    def reset(self) -> None:
        with self._lock:
            self._responses.clear()
            self._runs.clear()

    def _execute(self, statement: str, parameters: dict[str, Any]) -> list[dict[str, Any]]:
        with self._lock:
            self._runs.append((statement, parameters))
            response = next(
                (r for r in self._responses if r.match is None or r.match in statement),
                None,
            )
            if response is not None and response.once:
                self._responses.remove(response)

        if response is None:
            logger.debug("No scripted response; returning no rows")
            return []
        if response.error is not None:
            raise response.error
        # Each call gets its own copy of the scripted rows
        return copy.deepcopy(response.rows)

"""Base adapter with retry logic and error handling."""

import logging
from abc import ABC, abstractmethod
from typing import Any

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from config.settings import Settings, get_settings
from graphquery.graph.errors import Unreachable

logger = logging.getLogger(__name__)


def create_retry_decorator(settings: Settings):
    """Create a retry decorator with settings-based configuration.

    Only transport failures are retried; statements the backend rejected
    fail on the first attempt.

    Args:
        settings: Application settings.

    Returns:
        Configured retry decorator.
    """
    return retry(
        stop=stop_after_attempt(max(1, settings.RETRY_MAX_ATTEMPTS)),
        wait=wait_exponential(
            multiplier=settings.RETRY_BASE_DELAY_SECONDS,
            min=0,
            max=30,
        ),
        retry=retry_if_exception_type(Unreachable),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            f"Retry attempt {retry_state.attempt_number} after error: "
            f"{retry_state.outcome.exception()}"
        ),
    )


class BaseAdapter(ABC):
    """Abstract base class for graph backends.

    Subclasses hold only immutable configuration plus thread-safe client
    objects, so one adapter can serve concurrent callers.
    """

    name = "base"

    def __init__(self, settings: Settings | None = None):
        """Initialize the adapter.

        Args:
            settings: Application settings. Uses default if not provided.
        """
        self._settings = settings or get_settings()
        self._run_with_retry = create_retry_decorator(self._settings)(self._execute)

    @property
    def settings(self) -> Settings:
        return self._settings

    def run(self, statement: str, parameters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Execute a statement and return its rows.

        Args:
            statement: Cypher text.
            parameters: Parameter mapping passed out-of-band.

        Returns:
            List of rows keyed by column name.

        Raises:
            Unreachable: The backend could not be reached.
            RejectedByBackend: The backend reported an error.
            MalformedResponse: The response could not be decoded.
        """
        return self._run_with_retry(statement, dict(parameters or {}))

    @abstractmethod
    def _execute(self, statement: str, parameters: dict[str, Any]) -> list[dict[str, Any]]:
        """Execute one attempt of a statement."""
        pass

    def verify_connectivity(self) -> bool:
        """Check that the backend answers a trivial statement."""
        try:
            self.run("RETURN 1 AS ok")
            logger.info(f"{self.name} adapter connection verified")
            return True
        except Unreachable as e:
            logger.error(f"{self.name} adapter connection failed: {e}")
            return False

    def close(self) -> None:
        """Release backend resources."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

"""Graph backend adapters."""

from config.settings import Settings, get_settings

from .base import BaseAdapter, create_retry_decorator
from .bolt import BoltAdapter
from .http import HttpAdapter
from .memory import InMemoryAdapter

ADAPTERS: dict[str, type[BaseAdapter]] = {
    BoltAdapter.name: BoltAdapter,
    HttpAdapter.name: HttpAdapter,
    InMemoryAdapter.name: InMemoryAdapter,
}


def create_adapter(settings: Settings | None = None, name: str | None = None) -> BaseAdapter:
    """Build the adapter selected by ``GRAPH_ADAPTER`` (or ``name``).

    Raises:
        ValueError: If the adapter name is unknown.
    """
    settings = settings or get_settings()
    name = name or settings.GRAPH_ADAPTER
    try:
        adapter_cls = ADAPTERS[name]
    except KeyError:
        raise ValueError(f"Unknown graph adapter '{name}'. Choose from {sorted(ADAPTERS)}") from None
    return adapter_cls(settings)


__all__ = [
    "ADAPTERS",
    "BaseAdapter",
    "BoltAdapter",
    "HttpAdapter",
    "InMemoryAdapter",
    "create_adapter",
    "create_retry_decorator",
]

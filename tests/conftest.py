"""Pytest configuration and fixtures."""

import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from config.settings import Settings
from graphquery.adapters import InMemoryAdapter
from graphquery.graph.client import GraphClient
from graphquery.graph.entity import Edge, Node


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        GRAPH_ADAPTER="memory",
        NEO4J_URI="bolt://localhost:7687",
        NEO4J_HTTP_URL="http://localhost:7474",
        NEO4J_USER="neo4j",
        NEO4J_PASSWORD="testpassword",
        NEO4J_DATABASE="neo4j",
        RETRY_MAX_ATTEMPTS=2,
        RETRY_BASE_DELAY_SECONDS=0,
        LOG_STATEMENTS=True,
    )


@pytest.fixture
def memory_adapter(test_settings: Settings) -> InMemoryAdapter:
    """Create an in-memory adapter with no scripted responses."""
    return InMemoryAdapter(test_settings)


@pytest.fixture
def graph_client(memory_adapter: InMemoryAdapter, test_settings: Settings) -> GraphClient:
    """Create a graph client bound to the in-memory adapter."""
    return GraphClient(memory_adapter, test_settings)


@pytest.fixture
def disease_rows() -> list[dict]:
    """Rows as an adapter returns them for a single node column."""
    return [
        {"x": {"name": "Flu", "contagious": True}},
        {"x": {"name": "Measles", "contagious": True}},
        {"x": {"name": "Gout", "contagious": False}},
    ]


@pytest.fixture
def claim_node() -> Node:
    """Node payload as the Bolt adapter builds it."""
    return Node(("Claim",), {"id": "c-1", "amount": 120.5}, "4:abc:1")


@pytest.fixture
def covers_edge() -> Edge:
    """Edge payload as the Bolt adapter builds it."""
    return Edge("COVERS", {"since": 2021}, "4:abc:1", "4:abc:2", "5:abc:7")

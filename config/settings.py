"""Application settings using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Graph access configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Backend selection
    GRAPH_ADAPTER: Literal["bolt", "http", "memory"] = "bolt"

    # Neo4j Configuration
    NEO4J_URI: str = "bolt://localhost:7687"
    NEO4J_HTTP_URL: str = "http://localhost:7474"
    NEO4J_USER: str = "neo4j"
    NEO4J_PASSWORD: str = "password"
    NEO4J_DATABASE: str = "neo4j"

    # Transport (Bolt connection acquisition and HTTP request timeout)
    CONNECTION_TIMEOUT_SECONDS: float = 30.0
    MAX_CONNECTION_POOL_SIZE: int = 50
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_SECONDS: float = 1.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_STATEMENTS: bool = False

    @property
    def retries_enabled(self) -> bool:
        return self.RETRY_MAX_ATTEMPTS > 1

    @property
    def transaction_url(self) -> str:
        """Transactional HTTP endpoint for the configured database."""
        return f"{self.NEO4J_HTTP_URL.rstrip('/')}/db/{self.NEO4J_DATABASE}/tx/commit"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

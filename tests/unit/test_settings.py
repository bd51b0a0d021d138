"""Unit tests for settings and logging setup."""

import logging
from unittest.mock import patch

from config.log import LOG_FORMAT, configure_logging
from config.settings import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        """Test default values without environment overrides."""
        monkeypatch.delenv("GRAPH_ADAPTER", raising=False)
        settings = Settings(_env_file=None)

        assert settings.GRAPH_ADAPTER == "bolt"
        assert settings.NEO4J_DATABASE == "neo4j"
        assert settings.retries_enabled

    def test_environment_override(self, monkeypatch):
        """Test that environment variables are read."""
        monkeypatch.setenv("GRAPH_ADAPTER", "http")
        monkeypatch.setenv("RETRY_MAX_ATTEMPTS", "1")

        settings = Settings(_env_file=None)

        assert settings.GRAPH_ADAPTER == "http"
        assert not settings.retries_enabled

    def test_transaction_url(self, test_settings):
        """Test the transactional endpoint URL."""
        settings = test_settings.model_copy(update={"NEO4J_HTTP_URL": "http://graph:7474/", "NEO4J_DATABASE": "claims"})

        assert settings.transaction_url == "http://graph:7474/db/claims/tx/commit"

    def test_fields(self):
        """Test the configurable field set."""
        assert set(Settings.model_fields) == {
            "GRAPH_ADAPTER",
            "NEO4J_URI",
            "NEO4J_HTTP_URL",
            "NEO4J_USER",
            "NEO4J_PASSWORD",
            "NEO4J_DATABASE",
            "CONNECTION_TIMEOUT_SECONDS",
            "MAX_CONNECTION_POOL_SIZE",
            "RETRY_MAX_ATTEMPTS",
            "RETRY_BASE_DELAY_SECONDS",
            "LOG_LEVEL",
            "LOG_STATEMENTS",
        }
        assert not hasattr(Settings, "is_production")


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_level_and_format(self, test_settings):
        """Test that basicConfig receives the configured level."""
        settings = test_settings.model_copy(update={"LOG_LEVEL": "warning"})

        with patch("config.log.logging.basicConfig") as basic_config:
            configure_logging(settings)

        basic_config.assert_called_once_with(level=logging.WARNING, format=LOG_FORMAT)
        assert logging.getLogger("neo4j").level == logging.WARNING

"""Logging setup shared by scripts and embedding applications."""

import logging

from config.settings import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings.

    Args:
        settings: Application settings. Uses default if not provided.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # The neo4j driver is chatty at INFO
    if level > logging.DEBUG:
        logging.getLogger("neo4j").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

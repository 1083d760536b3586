"""Process-wide logging setup for the API and CLI entrypoints."""

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Apply basicConfig once; level defaults to LOG_LEVEL from settings."""
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

"""
Logging configuration for the dish builder.

Usage:
    from dish_builder.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL, any case (default: INFO)
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that write one line per request or connection
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def resolve_level(level: Optional[str] = None) -> int:
    """Numeric level for a level name, or for LOG_LEVEL when none is given; unknown names mean INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    return _LEVELS.get(level.strip().upper(), logging.INFO)


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure logging for the dish builder.

    Args:
        level: Level name. Falls back to LOG_LEVEL, then INFO.
    """
    numeric_level = resolve_level(level)

    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
    )
    logging.getLogger("dish_builder").setLevel(numeric_level)

    if numeric_level > logging.DEBUG:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        "Logging configured at %s level", logging.getLevelName(numeric_level)
    )

"""Centralised Loguru logger shared by the whole project."""
from __future__ import annotations

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Send log records at ``level`` and above to stderr.

    Loguru ships with a DEBUG sink on stderr; command-line entry points call this
    once after reading the configuration so the level follows ``logging.level``.
    """

    logger.remove()
    logger.add(sys.stderr, level=level.upper())


__all__ = ["configure_logging", "logger"]

"""Logging setup for the ledger service.

The ``ledger`` logger is configured once with a single stderr handler; every
module logs through ``logging.getLogger(__name__)`` and inherits it.
"""

import logging
import sys

from .config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(settings: Settings) -> logging.Logger:
    """Configure the package logger from settings and return it.

    Calling it again only updates the level.
    """
    global _configured
    logger = logging.getLogger("ledger")
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)

    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
        _configured = True
        logger.info("Logger configured with level: %s", settings.log_level)
    return logger

"""Logging setup shared by the plugin packages."""

import logging
import sys

from loguru import logger

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure stdlib logging and the loguru sink at the same level.

    The audit package logs through loguru, the reporting side through
    ``logging``; both end up on stderr.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    level = level.upper()
    numeric_level = getattr(logging, level, logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)

    logger.remove()
    logger.add(sys.stderr, level=logging.getLevelName(numeric_level))

    return logging.getLogger("replay_report")

"""Logging setup for the distserve process.

Library modules only ever call ``logging.getLogger(__name__)``; the entry
point calls :func:`configure_logging` once to give the ``distserve``
namespace a terminal handler.
"""

import logging
import sys

LOGGER_NAME = "distserve"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int | str = logging.DEBUG) -> logging.Logger:
    """Attach a stdout handler to the distserve logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger

"""Logging setup for the ``stockroom`` logger tree.

Modules log through ``logging.getLogger(__name__)``; this installs one
stream handler with a key=value line format on the package logger.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOG_FORMAT = "%(asctime)s level=%(levelname)s logger=%(name)s %(message)s"
PACKAGE_LOGGER = "stockroom"

_handler: logging.Handler | None = None


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Logger:
    """Install (or replace) the package handler.  Safe to call repeatedly."""
    global _handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)

    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(level.upper())
    return logger


def reset_logging() -> None:
    global _handler

    if _handler is not None:
        logging.getLogger(PACKAGE_LOGGER).removeHandler(_handler)
        _handler = None

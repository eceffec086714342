"""Logging setup for the KenKen engine.

Engine modules log under the ``kenken`` namespace. The generator emits one
INFO line per attempt and a WARNING for each rejected candidate; solver and
partitioner details are DEBUG.
"""

from __future__ import annotations

import logging
from typing import Optional, TextIO

LOGGER_NAME = "kenken"


def configure_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """Install a single compact handler on the ``kenken`` logger.

    Calling again replaces the handler and level. The root logger is left
    untouched so host applications keep their own configuration.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not logging.getLogger(LOGGER_NAME).handlers:
        configure_logging()
    return logging.getLogger(name or LOGGER_NAME)

"""
Logging setup for the word fridge service.

Installs a single console handler on the ``word_fridge`` logger so module
loggers created with ``logging.getLogger(__name__)`` share one format.
"""

from __future__ import annotations

import logging

LOGGER_NAME = "word_fridge"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(module)s: %(message)s"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    return logger

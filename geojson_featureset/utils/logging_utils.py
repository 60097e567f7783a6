"""Logging setup shared by the package entry points."""

from __future__ import annotations

import logging
from typing import Union

LOG_FORMAT = "[%(asctime)s] %(levelname)s in %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: Union[int, str] = logging.INFO, name: str = "geojson_featureset") -> logging.Logger:
    """Attach a stream handler to the package logger, once.

    Library modules only create module-level loggers; installing handlers
    is left to applications, which call this function.  Calling it again
    only updates the level.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger

"""Logging setup for the eg_core namespace."""

from __future__ import annotations

import logging
from typing import Optional, Union

from .config import get_settings

LOGGER_NAME = "eg_core"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    """Attach one stream handler to the package logger. Safe to call repeatedly."""
    logger = logging.getLogger(LOGGER_NAME)
    if level is None:
        level = get_settings().log_level
    logger.setLevel(level)
    if not any(getattr(h, "_eg_core", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._eg_core = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger

"""Process-wide logging setup shared by the API, services and repository."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from backend.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
ROOT_PACKAGE_LOGGER = "backend"

_configured_level: Optional[str] = None


def configure_logging(level: Optional[str] = None, stream: TextIO = sys.stdout) -> None:
    """Install the pipe-separated stdout handler once.

    Later calls with an explicit level only retune the ``backend`` package
    logger, so uvicorn's own handlers are never duplicated.
    """

    global _configured_level
    resolved_level = (level or get_settings().log_level).upper()

    if _configured_level is None:
        logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=stream)
    elif level is None:
        return

    logging.getLogger(ROOT_PACKAGE_LOGGER).setLevel(resolved_level)
    _configured_level = resolved_level


def get_logger(name: str) -> logging.Logger:
    """Return a configured logger for the requested module."""
    configure_logging()
    return logging.getLogger(name)

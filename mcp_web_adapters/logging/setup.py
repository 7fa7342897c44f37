"""Logging setup for stdio MCP servers.

stdout carries the JSON-RPC stream, so every handler installed here writes to
stderr.
"""

import logging
import sys
from typing import Optional

APP_LOGGER = "mcp_web_adapters"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Initialize stderr logging for the package logger.

    Safe to call more than once; previously installed handlers are replaced.
    """
    if level is None:
        from ..config import get_settings

        level = get_settings().logging.level

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(level)
    app_logger.propagate = False

    if app_logger.hasHandlers():
        app_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(level)
    stderr_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    app_logger.addHandler(stderr_handler)

    return app_logger


def shutdown_logging() -> None:
    """Flush and detach the package handlers."""
    app_logger = logging.getLogger(APP_LOGGER)
    for handler in list(app_logger.handlers):
        handler.flush()
        app_logger.removeHandler(handler)

"""
Logging setup for rocketcart.

The root logger is configured once, on first import:
    LOG_LEVEL   - DEBUG, INFO (default), WARNING, ...
    LOG_STYLE   - "detailed" (default, with timestamps) or "simple"

Usage:
    from rocketcart.logging import get_logger, log_id
    logger = get_logger(__name__)
    logger.info(f"Product {log_id(product_id)} added")
"""

import logging
import os
import sys
from functools import cache

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

# Libraries that log every inventory request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def _level_from_env() -> int:
    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def _configure_root_logger() -> None:
    root = logging.getLogger()
    if root.handlers:
        # Host application (or pytest) already owns logging
        return

    level = _level_from_env()
    style = os.environ.get("LOG_STYLE", "detailed").lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(SIMPLE_FORMAT if style == "simple" else DETAILED_FORMAT))

    root.setLevel(level)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    """Logger for a module (pass __name__)."""
    return logging.getLogger(name)


def log_id(value: object) -> str:
    """
    Render an id for a log line.

    Integer ids pass through. Anything else is escaped so a crafted value
    cannot forge extra log lines (CWE-117).
    """
    if value is None:
        return "N/A"
    if isinstance(value, int):
        return str(value)
    return (
        str(value)
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
        .replace("\x00", "")
    )


__all__ = ["DETAILED_FORMAT", "SIMPLE_FORMAT", "get_logger", "log_id"]

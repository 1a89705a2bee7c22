"""
Centralized logging configuration for the SuperFerry reservation system.

Log lines go to stderr so that command output on stdout stays clean.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_level() -> int:
    level = logging.getLevelName(os.environ.get("SUPERFERRY_LOG_LEVEL", "WARNING").upper())
    # getLevelName() hands back a "Level X" string for unknown names
    return level if isinstance(level, int) else logging.WARNING


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (default from SUPERFERRY_LOG_LEVEL, else WARNING)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    logger.setLevel(_default_level() if level is None else level)
    return logger

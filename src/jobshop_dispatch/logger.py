"""Logging configuration for jobshop-dispatch.

The library never installs handlers on import. Applications call
setup_logger() to see dispatch output.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

LOGGER_NAME = "jobshop_dispatch"

# Verbosity level constants for external use
VERBOSITY_SILENT = 0  # Only errors
VERBOSITY_WARNINGS = 1  # Fallbacks and infeasible input
VERBOSITY_SUMMARY = 2  # Run summaries and ignored options
VERBOSITY_DEBUG = 3  # Every commit

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_WARNINGS: logging.WARNING,
    VERBOSITY_SUMMARY: logging.INFO,
    VERBOSITY_DEBUG: logging.DEBUG,
}


def get_logger(name: str | None = None) -> logging.Logger:
    """Get the package logger, or a child of it.

    Args:
        name: Optional child suffix, e.g. "greedy" gives "jobshop_dispatch.greedy"
    """
    if name:
        return logging.getLogger(f"{LOGGER_NAME}.{name}")
    return logging.getLogger(LOGGER_NAME)


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the package logger with a verbosity level.

    Can be called multiple times to reconfigure the logger.

    Args:
        verbosity: 0=errors, 1=warnings, 2=summaries, 3=debug
        stream: Optional output stream (defaults to sys.stderr)
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.DEBUG if verbosity > 3 else logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to a clean state (handlers removed, propagation on)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

"""Logging configuration for the exchange engine.

Library modules only create module loggers via ``logging.getLogger(__name__)``;
handlers are attached once by the entry point through :func:`setup_logging`.
Log lines go to stderr; stdout is reserved for the CLI's JSON report.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level name/number (or ``LOG_LEVEL`` from env) into a logging level."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: int | str | None = None,
    module_name: str = "src",
) -> logging.Logger:
    """Configure and return a logger with consistent formatting.

    Args:
        level: Logging level; defaults to ``LOG_LEVEL`` or INFO.
        module_name: Logger to configure. The default covers every
            ``src.*`` module logger.

    Returns:
        Configured logger.
    """
    logger = logging.getLogger(module_name)
    resolved = resolve_level(level)
    logger.setLevel(resolved)

    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(handler)

    return logger

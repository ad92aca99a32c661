"""Logging configuration for statement-analytics.

Library modules only call ``logging.getLogger(__name__)``. Handlers are
attached here, once, by entry points such as the CLI.
"""

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "statement_analytics"
LOG_LEVEL_ENV = "STATEMENT_ANALYTICS_LOG_LEVEL"
DEFAULT_FORMAT = "%(levelname)s: %(message)s"

_handler: logging.Handler | None = None


def parse_level(level: int | str | None, default: int = logging.INFO) -> int:
    """
    Resolve a logging level.

    Accepts an int, a level name ("DEBUG") or a numeric string. ``None``
    falls back to the STATEMENT_ANALYTICS_LOG_LEVEL environment variable,
    then to ``default``.
    """
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = logging.getLevelName(level)
        if isinstance(numeric, int):
            return numeric
        raise ValueError(f"Unknown log level: {level}")

    env_val = os.getenv(LOG_LEVEL_ENV)
    if env_val:
        return parse_level(env_val)
    return default


def configure_logging(
    level: int | str | None = None,
    fmt: str | None = None,
    stream: IO[str] | None = None,
    default: int = logging.INFO,
) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling it again replaces the previous handler, so the level and
    stream can be changed (e.g. per CLI invocation in tests).

    Args:
        level: Logging level; see ``parse_level``
        fmt: Format string (default "LEVEL: message")
        stream: Output stream (default: sys.stderr at call time)
        default: Level used when neither ``level`` nor the environment sets one

    Returns:
        The configured package logger
    """
    global _handler

    logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(logger.handlers):
        if isinstance(existing, logging.NullHandler) or existing is _handler:
            logger.removeHandler(existing)

    resolved = parse_level(level, default)
    _handler = logging.StreamHandler(stream or sys.stderr)
    _handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    _handler.setLevel(resolved)

    logger.addHandler(_handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return logger

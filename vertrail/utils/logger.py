"""
Logging utilities for vertrail.

Diagnostics (which commits were walked, which tags were hit, how each bump
moved the version) go through the standard :mod:`logging` package under the
``vertrail`` namespace. The computed version itself is user-facing output
and is printed through :mod:`vertrail.utils.console` instead.

Nothing is emitted until :func:`setup_logging` is called; library users
embedding :class:`vertrail.core.Resolver` get a ``NullHandler`` by default.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from vertrail.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "vertrail"

_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Formatter that paints the level name with ANSI colors on a TTY."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not (self.use_color and _stderr_supports_color()):
            return super().format(record)

        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        # Work on a copy so other handlers see the plain level name.
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _stderr_supports_color() -> bool:
    if os.environ.get("NO_COLOR") or os.environ.get("CI"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, OSError):
        return False


def level_for_verbosity(verbosity: int) -> int:
    """Map the number of ``-v`` flags to a logging level.

    ``0`` → WARNING, ``1`` → INFO, ``2`` or more → DEBUG.
    """
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    *,
    level: int = logging.WARNING,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Install a single stream handler on the ``vertrail`` logger.

    Safe to call repeatedly; previous handlers are replaced.

    Args:
        level: Logging level for the package logger and its handler.
        verbose: Use the timestamped format including the logger name.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    with _lock:
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.handlers.clear()
        package_logger.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            ColoredFormatter(
                LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
                datefmt=LOG_DATE_FORMAT,
                use_color=not os.environ.get("NO_COLOR"),
            )
        )

        package_logger.addHandler(handler)
        package_logger.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger inside the ``vertrail`` hierarchy.

    ``get_logger("core.walker")`` and ``get_logger("vertrail.core.walker")``
    return the same logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        qualified = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        qualified = name
    else:
        qualified = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(qualified)
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not package_logger.handlers:
        package_logger.addHandler(logging.NullHandler())
    return logger


def disable_logging() -> None:
    """Silence vertrail logging and drop any configured handler."""
    with _lock:
        package_logger = logging.getLogger(ROOT_LOGGER_NAME)
        package_logger.handlers.clear()
        package_logger.addHandler(logging.NullHandler())
        package_logger.setLevel(logging.NOTSET)

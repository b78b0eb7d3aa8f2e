"""
Logging utilities for gomkeeper.

All diagnostic output goes through loggers under the ``gomkeeper``
namespace. The CLI calls :func:`setup_logging` once per invocation with the
``-v`` count; library users that never call it get a ``NullHandler`` and
stay silent.
"""

from __future__ import annotations

import os
import sys
import logging
from typing import IO, Optional

from gomkeeper.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "gomkeeper"

_logging_configured: bool = False


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when writing to a terminal."""

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
        color = self.COLORS.get(record.levelname) if self._colors_enabled() else None
        if not color:
            return super().format(record)

        # Color a copy so other handlers see the plain level name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)

    def _colors_enabled(self) -> bool:
        if not self.use_color:
            return False
        if os.environ.get("NO_COLOR") or os.environ.get("CI"):
            return False
        try:
            return sys.stderr.isatty()
        except (AttributeError, OSError):
            return False


def level_for_verbosity(verbose: int) -> int:
    """Map a ``-v`` count to a logging level (0=WARNING, 1=INFO, 2+=DEBUG)."""
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(
    verbose: int = 0,
    *,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the ``gomkeeper`` logger hierarchy.

    Calling it again replaces the previous handler instead of stacking a
    second one. Timestamps and logger names are added at DEBUG level.

    Args:
        verbose: Number of ``-v`` flags given on the command line.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    global _logging_configured

    level = level_for_verbosity(verbose)
    fmt = LOG_VERBOSE_FORMAT if level <= logging.DEBUG else LOG_DEFAULT_FORMAT

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        ColoredFormatter(
            fmt,
            datefmt=LOG_DATE_FORMAT,
            use_color=not os.environ.get("NO_COLOR"),
        )
    )

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    root_logger.propagate = False
    _logging_configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the gomkeeper namespace.

    ``get_logger("core.vcs")`` and ``get_logger("gomkeeper.core.vcs")`` both
    return the ``gomkeeper.core.vcs`` logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        qualified = ROOT_LOGGER_NAME
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        qualified = name
    else:
        qualified = f"{ROOT_LOGGER_NAME}.{name}"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if not root_logger.handlers:
        root_logger.addHandler(logging.NullHandler())

    return logging.getLogger(qualified)


def is_logging_configured() -> bool:
    """Return True once :func:`setup_logging` has run."""
    return _logging_configured

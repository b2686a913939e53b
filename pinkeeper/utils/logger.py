"""
Diagnostic logging for pinkeeper.

Everything below the ``pinkeeper`` logger is silent until
:func:`setup_logging` runs (the CLI calls it with the level chosen by
``-v``/``-vv``). Progress meant for the user is printed through
:mod:`pinkeeper.utils.console`, not logged.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from pinkeeper.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "pinkeeper"

_lock = threading.Lock()


def _qualified(name: Optional[str]) -> str:
    if not name or name == ROOT_LOGGER_NAME:
        return ROOT_LOGGER_NAME
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


class ColoredFormatter(logging.Formatter):
    """Formatter that wraps the level name in ANSI colors on a terminal."""

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
        color = self.COLORS.get(record.levelname)
        if color is None or not self.use_color or not self._should_use_color():
            return super().format(record)

        # Other handlers share the record
        levelname = record.levelname
        record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname

    @staticmethod
    def _should_use_color() -> bool:
        if os.environ.get("NO_COLOR") or os.environ.get("CI"):
            return False
        isatty = getattr(sys.stderr, "isatty", None)
        try:
            return bool(isatty and isatty())
        except OSError:
            return False


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Send ``pinkeeper`` log records to ``stream`` (stderr by default).

    Calling it again replaces the previous handler, so the CLI can run
    several times in one process (tests do).

    Args:
        level: Minimum level emitted.
        verbose: Include timestamps and logger names.
        stream: Destination stream.
    """
    formatter = ColoredFormatter(
        LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        use_color=not os.environ.get("NO_COLOR"),
    )
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(formatter)

    with _lock:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.handlers.clear()
        root.addHandler(handler)
        root.setLevel(level)
        root.propagate = False


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``pinkeeper.<name>``; dotted ``pinkeeper.*`` names pass through."""
    logger = logging.getLogger(_qualified(name))
    if not logger.handlers and not (logger.parent and logger.parent.handlers):
        logger.addHandler(logging.NullHandler())
    return logger

"""Runtime logging helpers."""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from loguru import logger

LOG_LEVEL_ENV = "LUME_LOG_LEVEL"
DEFAULT_DEBUG_FILE = "debug.txt"

_CONSOLE_FORMAT = "<level>[{level}] {message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"

_handler_ids: List[int] = []


def _stdout_sink(message) -> None:
    # Resolve sys.stdout on every write so redirected or captured streams
    # receive diagnostics.
    sys.stdout.write(message)
    sys.stdout.flush()


def _console_level(verbosity: int) -> str:
    if verbosity > 0:
        return "DEBUG"
    return os.getenv(LOG_LEVEL_ENV, "info").strip().upper() or "INFO"


def configure_logging(
    verbosity: int = 0,
    *,
    colorize: Optional[bool] = None,
    debug_file: Optional[str] = None,
) -> None:
    """Route diagnostics to standard output.

    Console level is read from LUME_LOG_LEVEL ("info" by default); any
    verbosity above zero switches to DEBUG and also writes a trace file,
    `debug.txt` unless `debug_file` names another path. Colour defaults to
    whether standard output is a terminal.
    """
    if colorize is None:
        colorize = sys.stdout.isatty()
    logger.remove()
    _handler_ids.clear()

    _handler_ids.append(
        logger.add(
            _stdout_sink,
            level=_console_level(verbosity),
            format=_CONSOLE_FORMAT,
            colorize=colorize,
            backtrace=False,
            diagnose=False,
        )
    )

    if verbosity > 0:
        _handler_ids.append(
            logger.add(
                debug_file or DEFAULT_DEBUG_FILE,
                level="DEBUG",
                format=_FILE_FORMAT,
                colorize=False,
                mode="w",
                backtrace=False,
                diagnose=False,
            )
        )


def shutdown_logging() -> None:
    """Flush and detach the handlers installed by configure_logging."""
    for handler_id in _handler_ids:
        try:
            logger.remove(handler_id)
        except ValueError:
            pass
    _handler_ids.clear()

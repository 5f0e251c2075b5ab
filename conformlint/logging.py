"""Diagnostic output for conformlint.

Reports are the only thing written to stdout (or ``--output``). Progress and
warnings from the pipeline go through the ``conformlint`` logger hierarchy,
which writes to stderr and, when requested, to a log file that always records
debug detail.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

ROOT_LOGGER = "conformlint"

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConsoleFormatter(logging.Formatter):
    """Format records as ``conformlint: warning: message``.

    With ``show_origin`` the pipeline stage that logged the record is added,
    e.g. ``conformlint: debug: [scanner] message``.
    """

    def __init__(self, *, show_origin: bool = False) -> None:
        super().__init__()
        self.show_origin = show_origin

    def format(self, record: logging.LogRecord) -> str:
        origin = ""
        if self.show_origin and record.name.startswith(f"{ROOT_LOGGER}."):
            origin = f"[{record.name[len(ROOT_LOGGER) + 1:]}] "
        text = f"{ROOT_LOGGER}: {record.levelname.lower()}: {origin}{record.getMessage()}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the logger for one pipeline stage (``scanner``, ``evaluator``...)."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Route conformlint diagnostics to stderr and an optional log file.

    Raises ``OSError`` when ``log_file`` cannot be opened; in that case the
    existing handlers are left untouched.
    """
    level = console_level(verbose=verbose, quiet=quiet)

    file_handler: Optional[logging.FileHandler] = None
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(level)
    console.setFormatter(ConsoleFormatter(show_origin=verbose))
    logger.addHandler(console)
    if file_handler is not None:
        logger.addHandler(file_handler)

    logger.setLevel(logging.DEBUG if file_handler is not None else level)
    logger.propagate = False
    return logger


__all__ = ["ConsoleFormatter", "ROOT_LOGGER", "configure_logging", "console_level", "get_logger"]

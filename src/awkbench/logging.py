"""Logging for awkbench.

Library modules log to ``logging.getLogger("awkbench")``; the CLI calls
:func:`setup_logging` once per command.  Console output stays terse so
it interleaves with the per-program progress lines, while the optional
log file records every run with timestamps.
"""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "awkbench"
_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class _ConsoleFormatter(logging.Formatter):
    """Bare messages for INFO, a level prefix for everything else."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"{record.levelname.lower()}: {message}"


def console_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Console log level for the ``-v``/``-q`` flags; verbose wins."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_file: Path | None = None,
) -> logging.Logger:
    """Configure and return the awkbench logger.

    Args:
        verbose: Show every warm-up and measured run on the console.
        quiet: Only show warnings and errors on the console.
        log_file: Also log everything at DEBUG to this file.  Its parent
            directory is created if needed.

    Returns:
        The configured awkbench logger.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Repeated CLI invocations in one process must not stack handlers.
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console = logging.StreamHandler()
    console.setLevel(console_level(verbose=verbose, quiet=quiet))
    console.setFormatter(_ConsoleFormatter("%(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(fh)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger under the awkbench namespace, e.g. ``awkbench.cli``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")

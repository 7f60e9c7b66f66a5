"""Logging setup for trialbench.

Per-trial progress lines are emitted at INFO, so ``--quiet`` hides them
while still showing failed executions (WARNING).  A log file, when
requested, always receives everything including the exact commands run.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER_NAME = "trialbench"

_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s [%(module)s] %(message)s"
_FILE_DATEFMT = "%H:%M:%S"
_CONSOLE_FORMAT = "%(levelname)-8s %(message)s"


def _console_level(verbose: bool, quiet: bool) -> int:
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
    """Configure and return the ``trialbench`` logger.

    Calling this again replaces the handlers installed by a previous
    call, closing them first.

    Args:
        verbose: Show DEBUG output (commands, fixture paths) on the console.
        quiet: Only show warnings and errors.  *verbose* wins if both are set.
        log_file: Also write every record to this file; parent
            directories are created.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(_console_level(verbose, quiet))
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        logger.addHandler(fh)
        logger.debug("Logging to %s", log_file)

    return logger

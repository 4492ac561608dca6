"""Run logging: console setup for the CLI and an optional per-run log file."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

LOGGER_NAME = "eth2fuzz"

_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_logger() -> logging.Logger:
    """Return the package root logger."""
    return logging.getLogger(LOGGER_NAME)


def setup_console_logging(verbose: bool = False) -> None:
    """Send eth2fuzz records to stderr; INFO by default, DEBUG when verbose."""
    logger = get_logger()
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)
    if not any(getattr(h, "_eth2fuzz_console", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler._eth2fuzz_console = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter("[eth2fuzz] %(levelname)s %(message)s"))
        logger.addHandler(handler)
    for h in logger.handlers:
        if getattr(h, "_eth2fuzz_console", False):
            h.setLevel(level)


@contextmanager
def run_log_context(
    log_file: Path,
    verbose: bool = False,
) -> Generator[logging.Logger, None, None]:
    """
    Attach a file handler to the eth2fuzz logger for the duration of the context.
    Log file is UTF-8, appended to; format: timestamp [LEVEL] message.
    """
    logger = get_logger()
    level = logging.DEBUG if verbose else logging.INFO
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    logger.addHandler(handler)

    try:
        yield logger
    finally:
        logger.removeHandler(handler)
        handler.close()

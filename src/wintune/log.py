"""Logging setup: console output and the per-run transcript."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

ROOT_LOGGER: str = "wintune"

CONSOLE_FORMAT: str = "%(levelname)-7s %(message)s"
TRANSCRIPT_FORMAT: str = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a console handler to the wintune logger (idempotent)."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    if not any(getattr(h, "_wintune_console", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        handler._wintune_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    for handler in logger.handlers:
        if getattr(handler, "_wintune_console", False):
            handler.setLevel(level)
    return logger


@contextmanager
def transcript(path: Path) -> Iterator[Path]:
    """
    Copy every wintune log record (DEBUG and up) to a file while the block runs.

    The file is opened in append mode so apply and a later revert share one
    transcript per run directory.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(TRANSCRIPT_FORMAT))

    previous_level = logger.level
    if logger.level == logging.NOTSET or logger.level > logging.DEBUG:
        logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)
    try:
        yield path
    finally:
        logger.removeHandler(handler)
        handler.close()
        logger.setLevel(previous_level)

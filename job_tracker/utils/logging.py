"""Logging setup for Job Tracker.

All modules log under the ``job_tracker`` namespace so a single call to
:func:`configure_logging` controls the whole package.
"""

import logging
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "job_tracker"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _resolve_level(level: str | None) -> int:
    if level is None:
        return logging.INFO
    return getattr(logging, level.upper(), logging.INFO)


def configure_logging(
    level: str | None = None,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the package logger.

    Handlers are attached only once; later calls just adjust levels so the
    CLI can override the level loaded from settings.

    Args:
        level: Log level name. Defaults to INFO; unknown names fall back to INFO.
        log_file: Optional file that receives a copy of every record.
        stream: Console stream, stderr unless given.

    Returns:
        The ``job_tracker`` logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    log_level = _resolve_level(level)
    logger.setLevel(log_level)

    if _configured:
        for handler in logger.handlers:
            handler.setLevel(log_level)
        return logger

    logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    _configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger.

    Accepts either a short name (``"controller"``) or a module ``__name__``
    that already starts with the package name.
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Drop handlers and forget configuration (used by tests)."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    _configured = False

# takeoutfix/logs.py

from __future__ import annotations
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

_TAGS = {
    "DEBUG": "DBG",
    "INFO": "INFO",
    "WARNING": "WARN",
    "ERROR": "ERR",
    "CRITICAL": "ERR",
}


class TagFormatter(logging.Formatter):
    """Console lines in the `[INFO] message` form."""

    def format(self, record: logging.LogRecord) -> str:
        tag = _TAGS.get(record.levelname, record.levelname)
        return f"[{tag}] {record.getMessage()}"


def setup_logging(log_file: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """Configure the `takeoutfix` logger tree.

    Args:
        log_file: Persistent diagnostic log; warnings and errors always land here.
        verbose: Also show DEBUG lines (already-canonical, no sidecar, ...).

    Returns:
        The package logger.
    """
    logger = logging.getLogger("takeoutfix")
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    # [INFO] lines to stdout, [WARN] and [ERR] to stderr.
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.addFilter(lambda record: record.levelno < logging.WARNING)
    console.setFormatter(TagFormatter())
    logger.addHandler(console)

    errors = logging.StreamHandler(sys.stderr)
    errors.setLevel(logging.WARNING)
    errors.setFormatter(TagFormatter())
    logger.addHandler(errors)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    return logger

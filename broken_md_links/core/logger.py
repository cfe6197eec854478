"""Logging Configuration.

This module configures the ``broken_md_links`` logger hierarchy: verbosity
levels exposed on the command line, an elapsed-time console format, optional
file rotation and optional structured (JSON) records.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import os
import sys
import time
from datetime import datetime
from enum import StrEnum
from typing import IO

ROOT_LOGGER_NAME = "broken_md_links"

_STANDARD_RECORD_KEYS = frozenset(
    {
        'name',
        'msg',
        'args',
        'levelname',
        'levelno',
        'pathname',
        'filename',
        'module',
        'lineno',
        'funcName',
        'created',
        'msecs',
        'relativeCreated',
        'thread',
        'threadName',
        'processName',
        'process',
        'taskName',
        'getMessage',
        'exc_info',
        'exc_text',
        'stack_info',
    }
)


class Verbosity(StrEnum):
    """Verbosity levels accepted on the command line."""

    SILENT = "silent"
    ERRORS = "errors"
    WARN = "warn"
    INFO = "info"
    VERBOSE = "verbose"
    DEBUG = "debug"

    @property
    def level(self) -> int:
        """Return the matching ``logging`` level."""
        return _VERBOSITY_LEVELS[self]


_VERBOSITY_LEVELS: dict[Verbosity, int] = {
    Verbosity.SILENT: logging.CRITICAL + 10,
    Verbosity.ERRORS: logging.ERROR,
    Verbosity.WARN: logging.WARNING,
    Verbosity.INFO: logging.INFO,
    Verbosity.VERBOSE: logging.DEBUG,
    Verbosity.DEBUG: logging.DEBUG,
}


class ElapsedFormatter(logging.Formatter):
    """Prefix each record with the time elapsed since logging was configured."""

    def __init__(self, started: float | None = None) -> None:
        super().__init__()
        self.started = time.monotonic() if started is None else started

    def format(self, record: logging.LogRecord) -> str:
        elapsed = max(0.0, time.monotonic() - self.started)
        secs = int(elapsed)
        millis = int((elapsed - secs) * 1000)
        prefix = f"[{secs // 60: >2}m {secs % 60: >2}.{millis:03}s]"
        message = f"{prefix} {record.levelname}: {record.getMessage()}"
        if record.exc_info:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return message


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        # Fields passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def configure_logging(
    verbosity: Verbosity | str = Verbosity.WARN,
    *,
    file_path: str | None = None,
    structured: bool = False,
    stream: IO[str] | None = None,
    max_file_size: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the package logger, replacing any previous configuration.

    Args:
        verbosity: Minimum verbosity to display
        file_path: Optional log file, rotated when it grows too large
        structured: Emit JSON records instead of the elapsed-time format
        stream: Console stream, defaults to ``sys.stdout``
        max_file_size: Size in bytes triggering a rotation
        backup_count: Number of rotated files kept

    Returns:
        The configured root logger of the package.
    """
    verbosity = Verbosity(verbosity)
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(verbosity.level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if verbosity is Verbosity.SILENT:
        logger.addHandler(logging.NullHandler())
        return logger

    formatter: logging.Formatter = StructuredFormatter() if structured else ElapsedFormatter()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if file_path:
        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            file_path, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_checker_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger inside the package hierarchy."""
    if not name or name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name or ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


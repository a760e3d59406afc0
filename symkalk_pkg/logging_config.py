"""Logging for SymKalk.

Every module logs through a child of the ``symkalk`` logger. Call sites attach
context with ``extra`` (``line``, ``target``, ``variable``), and the formatter
appends those fields to the message as ``key=value`` pairs.
"""

import logging
import sys
from datetime import datetime
from typing import Optional

from . import config

ROOT_LOGGER = "symkalk"
CONTEXT_FIELDS = ("line", "target", "variable")


class StructuredFormatter(logging.Formatter):
    """One line per record: timestamp, level, logger, message, then context fields."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).isoformat(timespec="milliseconds")
        text = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"
        context = [
            f"{field}={getattr(record, field)!r}"
            for field in CONTEXT_FIELDS
            if hasattr(record, field)
        ]
        if context:
            text = f"{text} ({', '.join(context)})"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


def setup_logging(
    level: Optional[str] = None, log_file: Optional[str] = None
) -> logging.Logger:
    """Attach fresh handlers to the ``symkalk`` logger.

    Args:
        level: Level name; defaults to ``config.LOG_LEVEL``
        log_file: Also write records to this file (UTF-8)

    Returns:
        The ``symkalk`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    level = (level or config.LOG_LEVEL).upper()
    logger.setLevel(getattr(logging, level, logging.WARNING))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = StructuredFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")

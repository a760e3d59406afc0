"""Tests for the structured log formatter and handler setup."""

import logging
import sys

from symkalk_pkg import config
from symkalk_pkg.logging_config import StructuredFormatter, get_logger, setup_logging


def make_record(msg, exc_info=None, **extra):
    record = logging.LogRecord(
        "symkalk.engine", logging.WARNING, __file__, 1, msg, (), exc_info
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_plain_record():
    text = StructuredFormatter().format(make_record("Postfix ready"))
    assert text.endswith("[WARNING] symkalk.engine: Postfix ready")


def test_context_fields_are_appended():
    record = make_record("Unexpected error", line="x +", target="f")
    text = StructuredFormatter().format(record)
    assert text.endswith("symkalk.engine: Unexpected error (line='x +', target='f')")


def test_traceback_follows_message():
    try:
        raise OverflowError("math range error")
    except OverflowError:
        record = make_record("Plot failed", exc_info=sys.exc_info())
    text = StructuredFormatter().format(record)
    assert "Plot failed\nTraceback" in text
    assert text.endswith("OverflowError: math range error")


def test_setup_logging_replaces_handlers(tmp_path):
    log_file = tmp_path / "symkalk.log"
    logger = setup_logging("debug", str(log_file))
    try:
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        get_logger("api").info("evaluated", extra={"line": "2 + 2"})
        for handler in logger.handlers:
            handler.flush()
        assert "(line='2 + 2')" in log_file.read_text(encoding="utf-8")

        logger = setup_logging()
        assert len(logger.handlers) == 1
        assert logger.level == getattr(logging, config.LOG_LEVEL.upper())
    finally:
        setup_logging()

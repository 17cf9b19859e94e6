"""Tests for logging configuration."""

import json
import logging
import sys

from app.core.logging import JSONFormatter, get_logger, setup_logging


def _record(msg: str, **extra) -> logging.LogRecord:
    record = logging.makeLogRecord(
        {"name": "teamsync.test", "levelname": "INFO", "levelno": logging.INFO, "msg": msg}
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_escapes_message(self):
        line = JSONFormatter().format(_record('quote " and\nnewline'))

        entry = json.loads(line)
        assert entry["message"] == 'quote " and\nnewline'
        assert entry["level"] == "INFO"
        assert entry["logger"] == "teamsync.test"

    def test_extra_fields_go_to_context(self):
        entry = json.loads(JSONFormatter().format(_record("hello", user_id=42)))

        assert entry["context"] == {"user_id": 42}

    def test_no_context_without_extras(self):
        entry = json.loads(JSONFormatter().format(_record("hello")))

        assert "context" not in entry

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = _record("failed")
            record.exc_info = sys.exc_info()

        entry = json.loads(JSONFormatter().format(record))

        assert "ValueError: boom" in entry["exception"]


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_structured_format_installs_json_handler(self):
        original_handlers = logging.root.handlers[:]
        original_level = logging.root.level
        try:
            setup_logging(level="warning", format_type="structured")

            assert logging.root.level == logging.WARNING
            assert isinstance(logging.root.handlers[0].formatter, JSONFormatter)
            assert logging.getLogger("uvicorn.access").level == logging.WARNING
        finally:
            logging.root.handlers = original_handlers
            logging.root.setLevel(original_level)

    def test_debug_enables_sql_logging(self):
        original_handlers = logging.root.handlers[:]
        original_level = logging.root.level
        try:
            setup_logging(level="DEBUG", format_type="dev")

            assert logging.getLogger("sqlalchemy.engine").level == logging.DEBUG
        finally:
            logging.root.handlers = original_handlers
            logging.root.setLevel(original_level)
            logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    def test_get_logger_namespaced(self):
        assert get_logger("main").name == "teamsync.main"

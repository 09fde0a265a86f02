"""
Tests for structured logging.

Test plan:
- JSONFormatter: timestamp, level, logger and message always present;
  known extra keys surfaced, unknown ones dropped, None values skipped;
  exceptions rendered
- setup_logging: JSON or text formatter installed on the root logger,
  level applied, unknown level names fall back to INFO
"""

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from bridge_payments.observability import JSONFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    fields: dict[str, object] = {
        "name": "bridge_payments.router",
        "levelname": "WARNING",
        "levelno": logging.WARNING,
        "msg": "Payment failed",
    }
    fields.update(extra)
    return logging.makeLogRecord(fields)


@pytest.fixture
def restore_root() -> Iterator[None]:
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


class TestJSONFormatter:
    def test_base_fields(self) -> None:
        log = json.loads(JSONFormatter().format(_record()))
        assert log["level"] == "WARNING"
        assert log["logger"] == "bridge_payments.router"
        assert log["message"] == "Payment failed"
        assert "timestamp" in log

    def test_surfaced_extras(self) -> None:
        record = _record(
            error_code="invalid_memo",
            state="DIRECT_ASSEMBLY",
            account_id="GABC",
            horizon_url="https://horizon.example.org",
        )
        log = json.loads(JSONFormatter().format(record))
        assert log["error_code"] == "invalid_memo"
        assert log["state"] == "DIRECT_ASSEMBLY"
        assert log["account_id"] == "GABC"
        assert log["horizon_url"] == "https://horizon.example.org"

    def test_unknown_and_none_extras_dropped(self) -> None:
        log = json.loads(JSONFormatter().format(_record(source="SSECRET", error_code=None)))
        assert "source" not in log
        assert "error_code" not in log

    def test_exception(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())
        log = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in log["exception"]


class TestSetupLogging:
    def test_json(self, restore_root: None) -> None:
        handler = setup_logging("DEBUG", "json")
        assert handler in logging.root.handlers
        assert isinstance(handler.formatter, JSONFormatter)
        assert logging.root.level == logging.DEBUG

    def test_text(self, restore_root: None) -> None:
        handler = setup_logging("warning", "text")
        assert not isinstance(handler.formatter, JSONFormatter)
        assert logging.root.level == logging.WARNING

    def test_unknown_level(self, restore_root: None) -> None:
        setup_logging("chatty", "json")
        assert logging.root.level == logging.INFO

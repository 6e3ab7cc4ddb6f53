from __future__ import annotations

import json
import logging
import sys

from activity_store.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_COUNT = 3
EXPECTED_ATTEMPTS = 2


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.count = EXPECTED_COUNT
    record.store = "lap_activities"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["count"] == EXPECTED_COUNT
    assert payload["store"] == "lap_activities"
    assert "pathname" not in payload
    assert "lineno" not in payload


def test_json_formatter_emits_fields_passed_through_logger_extra() -> None:
    logger = logging.getLogger("activity_store.tests")
    record = logger.makeRecord(
        logger.name, logging.WARNING, __file__, 1, "write dropped", (), None, extra={"attempts": EXPECTED_ATTEMPTS}
    )

    payload = json.loads(_json_formatter(record))

    assert payload["attempts"] == EXPECTED_ATTEMPTS
    assert payload["message"] == "write dropped"
    assert set(payload) == {"level", "logger", "message", "attempts"}


def test_json_formatter_renders_exceptions() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("t", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert "RuntimeError: boom" in payload["exc_info"]


def test_configure_logging_sets_root_level() -> None:
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    try:
        configure_logging(level="DEBUG", json_logs=True)
        assert root.level == logging.DEBUG
        assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)

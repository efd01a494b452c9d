"""
Tests for TestPilot logging utilities.
"""

import json
import logging
from unittest.mock import patch

import pytest
from rich.logging import RichHandler

from testpilot.monitoring.logger import (
    ContextLogAdapter,
    JSONFormatter,
    get_logger,
    log_performance_metric,
    log_test_event,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers = handlers
    root.setLevel(level)


def _record(msg: str = "Step finished", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="testpilot.execution.executor",
        level=logging.INFO,
        pathname=__file__,
        lineno=12,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields():
    output = json.loads(JSONFormatter().format(_record(step_id="step-2", status="pass")))

    assert output["message"] == "Step finished"
    assert output["level"] == "INFO"
    assert output["logger"] == "testpilot.execution.executor"
    assert output["step_id"] == "step-2"
    assert output["status"] == "pass"
    assert "args" not in output


def test_json_formatter_serializes_unknown_types():
    output = json.loads(JSONFormatter().format(_record(elapsed=object())))
    assert isinstance(output["elapsed"], str)


def test_get_logger_with_context():
    logger = get_logger("testpilot.test", run_id="abc")
    assert isinstance(logger, ContextLogAdapter)

    msg, kwargs = logger.process("hello", {"extra": {"step_id": "step-0"}})
    assert kwargs["extra"] == {"step_id": "step-0", "run_id": "abc"}


def test_get_logger_without_context():
    assert isinstance(get_logger("testpilot.test"), logging.Logger)


def test_setup_logging_text_uses_rich(settings, restore_root_logger):
    with patch("testpilot.monitoring.logger.get_settings", return_value=settings):
        root = setup_logging(log_level="WARNING", log_format="text")

    assert root.level == logging.WARNING
    assert any(isinstance(h, RichHandler) for h in root.handlers)


def test_setup_logging_json_with_file(settings, restore_root_logger, tmp_path):
    log_file = tmp_path / "testpilot.log"
    with patch("testpilot.monitoring.logger.get_settings", return_value=settings):
        root = setup_logging(log_level="INFO", log_format="json", log_file=str(log_file))

    formatters = [type(h.formatter) for h in root.handlers]
    assert formatters.count(JSONFormatter) == 2
    assert any(isinstance(h, logging.FileHandler) for h in root.handlers)

    for handler in root.handlers:
        handler.close()


def test_log_test_event(caplog):
    with caplog.at_level(logging.INFO, logger="testpilot.test_events"):
        log_test_event("step_completed", "run-1", step_id="step-0", data={"status": "fail"})

    record = caplog.records[-1]
    assert record.getMessage() == "Test event: step_completed"
    assert record.run_id == "run-1"
    assert record.step_id == "step-0"
    assert record.status == "fail"


def test_log_performance_metric(caplog):
    with caplog.at_level(logging.DEBUG, logger="testpilot.performance"):
        log_performance_metric("page_navigation", 123.456, context={"url": "https://example.com"})

    record = caplog.records[-1]
    assert record.getMessage() == "Performance metric: page_navigation=123.5ms"
    assert record.url == "https://example.com"
    assert record.unit == "ms"

"""
Unit tests for error handling exceptions.
"""

from datetime import datetime

from testpilot.error_handling import (
    BrowserError,
    GenerationError,
    InvalidRunRequestError,
    PlanStorageError,
    QuotedTextMissingError,
    SessionError,
    SessionInitializationError,
    SessionLostError,
    StepParameterError,
    StepValidationError,
    TestPilotError,
)


class TestTestPilotError:
    """Test base exception class."""

    def test_basic_creation(self):
        """Test basic error creation."""
        error = TestPilotError("Test error")
        assert str(error) == "Test error"
        assert error.message == "Test error"
        assert error.error_code == "TestPilotError"
        assert error.details == {}
        assert error.cause is None
        assert isinstance(error.timestamp, datetime)

    def test_to_dict(self):
        """Test conversion to dictionary."""
        cause = ValueError("Original error")
        error = TestPilotError(
            "Wrapped error",
            error_code="TP001",
            details={"key": "value"},
            cause=cause,
        )

        result = error.to_dict()
        assert result["error_type"] == "TestPilotError"
        assert result["error_code"] == "TP001"
        assert result["details"] == {"key": "value"}
        assert result["cause"] == "Original error"
        assert "timestamp" in result


class TestStepErrors:
    """Tests for per-step errors."""

    def test_step_parameter_error(self):
        error = StepParameterError("Invalid timeout value: x", action="waitForTimeout", value="x")
        assert error.details == {"action": "waitForTimeout", "value": "x"}
        assert isinstance(error, TestPilotError)

    def test_quoted_text_missing_error(self):
        error = QuotedTextMissingError("checkText", "Check the title")
        assert error.message == (
            "Could not extract expected text from description for 'checkText': Check the title"
        )
        assert isinstance(error, StepParameterError)
        assert error.action == "checkText"

    def test_step_validation_error(self):
        error = StepValidationError("bad", raw_action="drag", failed_fields=["action"])
        assert error.details["raw_action"] == "drag"
        assert error.failed_fields == ["action"]


class TestSessionErrors:
    """Tests for run-aborting errors."""

    def test_hierarchy(self):
        assert issubclass(SessionInitializationError, SessionError)
        assert issubclass(SessionLostError, SessionError)
        assert issubclass(SessionError, BrowserError)
        assert not issubclass(InvalidRunRequestError, SessionError)

    def test_browser_error_details(self):
        error = SessionInitializationError(
            "Failed to open start URL", url="https://example.com", action="navigate"
        )
        assert error.details == {
            "url": "https://example.com",
            "selector": None,
            "action": "navigate",
        }

    def test_session_lost_records_step(self):
        error = SessionLostError("lost", step_index=3, selector="#go")
        assert error.step_index == 3
        assert error.details["step_index"] == 3
        assert error.selector == "#go"


class TestOtherErrors:
    """Tests for generation and storage errors."""

    def test_generation_error(self):
        error = GenerationError("Invalid URL format.", url="ftp://x")
        assert error.url == "ftp://x"
        assert error.details["url"] == "ftp://x"

    def test_plan_storage_error(self):
        error = PlanStorageError("broken", path="data/test_plan.json")
        assert error.details["path"] == "data/test_plan.json"

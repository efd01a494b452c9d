"""
Unit tests for core data types.
"""

import pytest
from pydantic import ValidationError

from testpilot.core.types import (
    ExecutionReport,
    ExecutionResult,
    ExecutionStatus,
    Scenario,
    SupportedAction,
    TestStep,
)


def _result(index: int, status: ExecutionStatus, details=None) -> ExecutionResult:
    return ExecutionResult(
        id=f"step-{index}",
        step_description="Click the button",
        action="click",
        target="#submit",
        confidence=0.9,
        status=status,
        details=details,
        screenshot_data_url="data:image/png;base64,AAAA",
        snapshot_width=1280,
        snapshot_height=720,
    )


class TestSupportedAction:
    """Tests for the action vocabulary."""

    def test_vocabulary_size(self):
        assert len(SupportedAction) == 25

    def test_from_name_is_case_insensitive(self):
        assert SupportedAction.from_name("selectoption") is SupportedAction.SELECT_OPTION
        assert SupportedAction.from_name("CHECKTEXT") is SupportedAction.CHECK_TEXT
        assert SupportedAction.from_name("  click ") is SupportedAction.CLICK

    def test_from_name_unknown(self):
        assert SupportedAction.from_name("drag") is None
        assert SupportedAction.from_name(None) is None
        assert SupportedAction.from_name(42) is None


class TestTestStep:
    """Tests for TestStep model."""

    def test_defaults(self):
        step = TestStep(action=SupportedAction.RELOAD)
        assert step.target == ""
        assert step.description == ""
        assert step.confidence == 1.0

    def test_action_normalized_from_any_case(self):
        step = TestStep.model_validate({"action": "WaitForTimeout", "target": "500"})
        assert step.action is SupportedAction.WAIT_FOR_TIMEOUT

    def test_unknown_action_rejected(self):
        with pytest.raises(ValidationError):
            TestStep.model_validate({"action": "drag", "target": "#a"})

    def test_confidence_bounds(self):
        with pytest.raises(ValidationError):
            TestStep(action=SupportedAction.CLICK, target="#a", confidence=1.5)

    def test_payload_uses_wire_names(self):
        step = TestStep(action=SupportedAction.SELECT_OPTION, target="#country")
        payload = step.to_payload()
        assert payload["action"] == "selectOption"
        assert payload["target"] == "#country"


class TestScenario:
    """Tests for Scenario model."""

    def test_generated_id(self):
        first = Scenario(name="Login")
        second = Scenario(name="Login")
        assert first.id.startswith("scenario-")
        assert first.id != second.id

    def test_name_required(self):
        with pytest.raises(ValidationError):
            Scenario(name="")

    def test_camel_case_round_trip(self):
        scenario = Scenario.model_validate(
            {
                "id": "s1",
                "name": "Search",
                "testSteps": [{"action": "click", "target": "#go", "description": "Go"}],
            }
        )
        assert scenario.test_steps[0].action is SupportedAction.CLICK
        assert "testSteps" in scenario.to_payload()


class TestExecutionResult:
    """Tests for ExecutionResult model."""

    def test_status_is_terminal(self):
        assert ExecutionStatus.PASS.is_terminal
        assert ExecutionStatus.SKIPPED.is_terminal
        assert not ExecutionStatus.RUNNING.is_terminal
        assert not ExecutionStatus.PENDING.is_terminal

    def test_payload_is_camel_case(self):
        payload = _result(0, ExecutionStatus.PASS).to_payload()
        assert payload["stepDescription"] == "Click the button"
        assert payload["screenshotDataUrl"].startswith("data:image/png")
        assert payload["snapshotWidth"] == 1280
        assert payload["status"] == "pass"
        assert "details" not in payload

    def test_frozen(self):
        result = _result(0, ExecutionStatus.PASS)
        with pytest.raises(ValidationError):
            result.status = ExecutionStatus.FAIL


class TestExecutionReport:
    """Tests for ExecutionReport aggregation."""

    def test_counts(self):
        report = ExecutionReport(
            results=[
                _result(0, ExecutionStatus.PASS),
                _result(1, ExecutionStatus.FAIL, "boom"),
                _result(2, ExecutionStatus.SKIPPED, "unsupported"),
                _result(3, ExecutionStatus.PASS),
            ]
        )
        assert report.passed == 2
        assert report.failed == 1
        assert report.skipped == 1
        assert report.succeeded is False

    def test_succeeded_requires_no_error(self):
        report = ExecutionReport(results=[_result(0, ExecutionStatus.PASS)], error="lost")
        assert report.succeeded is False
        assert report.to_payload()["error"] == "lost"

    def test_payload_without_error(self):
        report = ExecutionReport(results=[_result(0, ExecutionStatus.PASS)])
        payload = report.to_payload()
        assert "error" not in payload
        assert payload["results"][0]["id"] == "step-0"

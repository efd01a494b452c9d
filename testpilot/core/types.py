"""
Core data models and types for the TestPilot testing framework.
"""

from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SupportedAction(str, Enum):
    """Closed set of browser actions the executor understands."""

    CLICK = "click"
    DBLCLICK = "dblclick"
    TYPE = "type"
    FILL = "fill"
    NAVIGATE = "navigate"
    PRESS = "press"
    CHECK = "check"
    UNCHECK = "uncheck"
    HOVER = "hover"
    SELECT_OPTION = "selectOption"
    FOCUS = "focus"
    RELOAD = "reload"
    GO_BACK = "goBack"
    GO_FORWARD = "goForward"
    WAIT_FOR_TIMEOUT = "waitForTimeout"
    WAIT_FOR_SELECTOR = "waitForSelector"
    ACCEPT_DIALOG = "acceptDialog"
    DISMISS_DIALOG = "dismissDialog"
    SCROLL_TO_BOTTOM = "scrollToBottom"
    SCROLL_TO_TOP = "scrollToTop"
    SCROLL_TO_ELEMENT = "scrollToElement"
    SET_VIEWPORT = "setViewport"
    CHECK_VISIBILITY = "checkVisibility"
    CHECK_TEXT = "checkText"
    CHECK_URL = "checkUrl"

    @classmethod
    def from_name(cls, value: object) -> Optional["SupportedAction"]:
        """Resolve an action name case-insensitively, or None if unknown."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return None


class ExecutionStatus(str, Enum):
    """Status of a single executed step."""

    PENDING = "pending"
    RUNNING = "running"
    PASS = "pass"
    FAIL = "fail"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.PASS, ExecutionStatus.FAIL, ExecutionStatus.SKIPPED)


class CamelModel(BaseModel):
    """Base model serialized with the camelCase keys used on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TestStep(CamelModel):
    """A single planned browser interaction."""

    action: SupportedAction = Field(..., description="Action to be performed")
    target: str = Field("", description="Selector, URL, key, duration or dimensions")
    description: str = Field(
        "", description="Human-readable description; carries quoted values for some actions"
    )
    confidence: float = Field(
        1.0, ge=0.0, le=1.0, description="Generator confidence, informational only"
    )

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, value: object) -> object:
        """Accept action names regardless of case."""
        resolved = SupportedAction.from_name(value)
        return resolved if resolved is not None else value


class RejectedStep(CamelModel):
    """A raw step that failed boundary validation.

    Kept so the run can still report it positionally instead of silently
    dropping it.
    """

    action: str = ""
    target: str = ""
    description: str = ""
    confidence: float = 0.0
    reason: str = Field(..., description="Why the step was rejected")


class Scenario(CamelModel):
    """A named, ordered sequence of test steps."""

    id: str = Field(default_factory=lambda: f"scenario-{uuid4().hex[:12]}")
    name: str = Field(..., min_length=1, description="Scenario name")
    description: Optional[str] = None
    test_steps: List[TestStep] = Field(default_factory=list)


class ExecutionResult(CamelModel):
    """Outcome of one executed step, positionally aligned with the input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    step_description: str
    action: str
    target: str
    confidence: float
    status: ExecutionStatus
    details: Optional[str] = None
    screenshot_data_url: Optional[str] = None
    snapshot_width: Optional[int] = None
    snapshot_height: Optional[int] = None
    snapshot_ai_hint: Optional[str] = None
    snapshot_error: Optional[str] = Field(
        None, description="Screenshot capture failure reason (metadata only)"
    )


class ExecutionReport(BaseModel):
    """Results of a full run plus an optional run-level error."""

    results: List[ExecutionResult] = Field(default_factory=list)
    error: Optional[str] = None

    def count(self, status: ExecutionStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def passed(self) -> int:
        return self.count(ExecutionStatus.PASS)

    @property
    def failed(self) -> int:
        return self.count(ExecutionStatus.FAIL)

    @property
    def skipped(self) -> int:
        return self.count(ExecutionStatus.SKIPPED)

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.failed == 0

    def to_payload(self) -> dict:
        payload = {"results": [result.to_payload() for result in self.results]}
        if self.error:
            payload["error"] = self.error
        return payload

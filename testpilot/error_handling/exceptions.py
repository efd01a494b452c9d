"""
Custom exception hierarchy for TestPilot error handling.

Separates errors that abort a whole run (invalid requests, lost sessions)
from errors that only fail the step that raised them.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


class TestPilotError(Exception):
    """Base exception for all TestPilot errors."""

    __test__ = False

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }


class InvalidRunRequestError(TestPilotError):
    """Raised when a run is requested without a URL or without steps."""
    pass


class StepParameterError(TestPilotError):
    """Raised when a step's target or description cannot be parsed for its action."""

    def __init__(
        self,
        message: str,
        action: str,
        value: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.action = action
        self.value = value
        self.details.update({
            "action": action,
            "value": value
        })


class QuotedTextMissingError(StepParameterError):
    """Raised when an action requires quoted text the description does not contain."""

    def __init__(self, action: str, description: str, **kwargs):
        super().__init__(
            f"Could not extract expected text from description for '{action}': {description}",
            action=action,
            value=description,
            **kwargs
        )


class BrowserError(TestPilotError):
    """Error related to browser automation."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        selector: Optional[str] = None,
        action: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.url = url
        self.selector = selector
        self.action = action
        self.details.update({
            "url": url,
            "selector": selector,
            "action": action
        })


class SessionError(BrowserError):
    """Base class for errors that invalidate the browser session for the run."""
    pass


class SessionInitializationError(SessionError):
    """Raised when the session cannot be launched or the start URL cannot be loaded."""
    pass


class SessionLostError(SessionError):
    """Raised when the page or browser disappears in the middle of a run."""

    def __init__(self, message: str, step_index: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.step_index = step_index
        self.details["step_index"] = step_index


class StepValidationError(TestPilotError):
    """Raised when a raw step does not conform to the step schema."""

    def __init__(
        self,
        message: str,
        raw_action: Optional[str] = None,
        failed_fields: Optional[List[str]] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.raw_action = raw_action
        self.failed_fields = failed_fields or []
        self.details.update({
            "raw_action": raw_action,
            "failed_fields": self.failed_fields
        })


class GenerationError(TestPilotError):
    """Raised when page markup cannot be fetched or scenarios cannot be generated."""

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.url = url
        self.details["url"] = url


class PlanStorageError(TestPilotError):
    """Raised when a stored test plan cannot be read or is malformed."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.details["path"] = path

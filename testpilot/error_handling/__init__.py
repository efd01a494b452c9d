"""
Error handling for TestPilot.

Per-step errors are recorded as failed results; session errors abort the run.
"""

from .exceptions import (
    TestPilotError,
    InvalidRunRequestError,
    StepParameterError,
    QuotedTextMissingError,
    BrowserError,
    SessionError,
    SessionInitializationError,
    SessionLostError,
    StepValidationError,
    GenerationError,
    PlanStorageError,
)

__all__ = [
    "TestPilotError",
    "InvalidRunRequestError",
    "StepParameterError",
    "QuotedTextMissingError",
    "BrowserError",
    "SessionError",
    "SessionInitializationError",
    "SessionLostError",
    "StepValidationError",
    "GenerationError",
    "PlanStorageError",
]

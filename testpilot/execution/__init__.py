"""
Step execution engine exports.
"""

from testpilot.execution.dispatcher import ActionDispatcher, StepOutcome
from testpilot.execution.evidence import Evidence, EvidenceCollector
from testpilot.execution.executor import StepExecutor, synthesize_failures
from testpilot.execution.parsing import (
    QuotedText,
    parse_quoted_text,
    parse_timeout_ms,
    parse_viewport,
    redact_quoted_text,
)

__all__ = [
    "ActionDispatcher",
    "StepOutcome",
    "Evidence",
    "EvidenceCollector",
    "StepExecutor",
    "synthesize_failures",
    "QuotedText",
    "parse_quoted_text",
    "parse_timeout_ms",
    "parse_viewport",
    "redact_quoted_text",
]

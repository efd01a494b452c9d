"""
Core module exports.
"""

from testpilot.core.interfaces import (
    BrowserSession,
    PlanStorage,
    ScenarioGenerator,
)
from testpilot.core.plan import TestPlan
from testpilot.core.types import (
    ExecutionReport,
    ExecutionResult,
    ExecutionStatus,
    RejectedStep,
    Scenario,
    SupportedAction,
    TestStep,
)

__all__ = [
    # Interfaces
    "BrowserSession",
    "ScenarioGenerator",
    "PlanStorage",
    # Types
    "SupportedAction",
    "ExecutionStatus",
    "TestStep",
    "RejectedStep",
    "Scenario",
    "TestPlan",
    "ExecutionResult",
    "ExecutionReport",
]

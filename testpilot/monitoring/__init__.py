"""
Monitoring and reporting exports.
"""

from testpilot.monitoring.logger import (
    get_logger,
    log_performance_metric,
    log_test_event,
    setup_logging,
)
from testpilot.monitoring.reporter import ResultsReporter

__all__ = [
    "get_logger",
    "log_performance_metric",
    "log_test_event",
    "setup_logging",
    "ResultsReporter",
]

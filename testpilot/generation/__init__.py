"""
Scenario generation exports.
"""

from testpilot.generation.generator import PageScenarioGenerator, is_valid_url

__all__ = ["PageScenarioGenerator", "is_valid_url"]

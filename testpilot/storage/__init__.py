"""
Plan storage exports.
"""

from testpilot.storage.plan_store import JsonFilePlanStorage, load_steps_file

__all__ = ["JsonFilePlanStorage", "load_steps_file"]

"""
Browser automation module exports.
"""

from testpilot.browser.dialogs import DialogHandler, DialogMode
from testpilot.browser.driver import PlaywrightDriver

__all__ = [
    "PlaywrightDriver",
    "DialogHandler",
    "DialogMode",
]

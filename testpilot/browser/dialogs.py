"""
One-shot handlers for native browser dialogs (alert, confirm, prompt).

A handler is armed by an acceptDialog/dismissDialog step and resolved by the
next dialog the page raises, which may happen during a later step.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from testpilot.monitoring.logger import get_logger

if TYPE_CHECKING:
    from playwright.async_api import Dialog

logger = get_logger(__name__)


class DialogMode(str, Enum):
    """What to do with the next dialog."""

    ACCEPT = "accept"
    DISMISS = "dismiss"


class DialogHandler:
    """
    Explicitly registered handler that acts on at most one dialog.

    State moves from armed to either consumed (a dialog arrived) or expired
    (replaced by a newer handler or the session ended first).
    """

    def __init__(self, mode: DialogMode) -> None:
        self.mode = mode
        self.armed_at = datetime.now(timezone.utc)
        self.consumed = False
        self.expired = False
        self.dialog_type: Optional[str] = None
        self.dialog_message: Optional[str] = None

    @property
    def pending(self) -> bool:
        return not self.consumed and not self.expired

    def expire(self) -> None:
        if self.pending:
            self.expired = True

    async def __call__(self, dialog: "Dialog") -> None:
        if not self.pending:
            return

        self.consumed = True
        self.dialog_type = dialog.type
        self.dialog_message = dialog.message

        logger.info(
            "Handling dialog",
            extra={
                "dialog_type": dialog.type,
                "dialog_message": dialog.message,
                "mode": self.mode.value,
            },
        )
        if self.mode is DialogMode.ACCEPT:
            await dialog.accept()
        else:
            await dialog.dismiss()

    def __repr__(self) -> str:
        state = "consumed" if self.consumed else "expired" if self.expired else "armed"
        return f"DialogHandler(mode={self.mode.value}, state={state})"

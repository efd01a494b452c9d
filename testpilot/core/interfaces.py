"""
Core interfaces and abstract base classes for the TestPilot framework.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

from testpilot.core.types import Scenario

if TYPE_CHECKING:
    from playwright.async_api import Page

    from testpilot.browser.dialogs import DialogHandler, DialogMode
    from testpilot.core.plan import TestPlan


class BrowserSession(ABC):
    """One live browser page used by exactly one run."""

    @property
    @abstractmethod
    def page(self) -> Optional["Page"]:
        """The page steps are executed against."""
        pass

    @abstractmethod
    async def start(self) -> None:
        """Launch the browser and open a page."""
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Close the page and release every browser resource."""
        pass

    @abstractmethod
    async def navigate(self, url: str, timeout_ms: Optional[int] = None) -> None:
        """Navigate to a URL and wait for the network to settle."""
        pass

    @abstractmethod
    async def screenshot(self) -> bytes:
        """Capture the current viewport as PNG bytes."""
        pass

    @abstractmethod
    def is_alive(self) -> bool:
        """Whether the page and browser can still be driven."""
        pass

    @abstractmethod
    def arm_dialog_handler(self, mode: "DialogMode") -> "DialogHandler":
        """Register a one-shot handler for the next native dialog."""
        pass

    async def __aenter__(self) -> "BrowserSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


class ScenarioGenerator(ABC):
    """Produces test scenarios for a page."""

    @abstractmethod
    async def generate(self, url: str) -> List[Scenario]:
        """
        Generate scenarios for the page at a URL.

        Args:
            url: Page to analyze

        Returns:
            Validated scenarios
        """
        pass


class PlanStorage(ABC):
    """Snapshot storage for the working test plan."""

    @abstractmethod
    def save(self, plan: "TestPlan") -> None:
        """Persist a plan snapshot, replacing any previous one."""
        pass

    @abstractmethod
    def load(self) -> Optional["TestPlan"]:
        """Load the last snapshot, or None if nothing was saved."""
        pass

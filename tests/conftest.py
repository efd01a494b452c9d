"""
Shared fixtures for TestPilot tests.
"""

import io
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image

from testpilot.browser.dialogs import DialogHandler, DialogMode
from testpilot.config.settings import Settings
from testpilot.core.interfaces import BrowserSession


def make_png(width: int = 64, height: int = 32) -> bytes:
    """Encode a blank PNG of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


def make_page(url: str = "https://example.com/"):
    """Mock Playwright page whose locator() always returns the same locator."""
    locator = AsyncMock()
    locator.is_visible.return_value = True
    locator.text_content.return_value = ""

    page = AsyncMock()
    page.locator = MagicMock(return_value=locator)
    page.url = url
    return page, locator


class FakeSession(BrowserSession):
    """In-memory browser session driving a mocked page."""

    def __init__(
        self,
        page=None,
        screenshot_bytes: Optional[bytes] = None,
        start_error: Optional[Exception] = None,
        navigate_error: Optional[Exception] = None,
        screenshot_error: Optional[Exception] = None,
    ) -> None:
        self._page = page if page is not None else make_page()[0]
        self.screenshot_bytes = screenshot_bytes if screenshot_bytes is not None else make_png()
        self.start_error = start_error
        self.navigate_error = navigate_error
        self.screenshot_error = screenshot_error

        self.started = False
        self.stopped = False
        self.alive = True
        self.navigations: List[tuple] = []
        self.dialog_handlers: List[DialogHandler] = []

    @property
    def page(self):
        return self._page

    async def start(self) -> None:
        self.started = True
        if self.start_error:
            raise self.start_error

    async def stop(self) -> None:
        self.stopped = True
        self.alive = False

    async def navigate(self, url: str, timeout_ms: Optional[int] = None) -> None:
        self.navigations.append((url, timeout_ms))
        if self.navigate_error:
            raise self.navigate_error

    async def screenshot(self) -> bytes:
        if self.screenshot_error:
            raise self.screenshot_error
        return self.screenshot_bytes

    def is_alive(self) -> bool:
        return self.alive

    def arm_dialog_handler(self, mode: DialogMode) -> DialogHandler:
        handler = DialogHandler(mode)
        self.dialog_handlers.append(handler)
        return handler


@pytest.fixture
def settings() -> Settings:
    """Settings with deterministic defaults and a dummy API key."""
    return Settings(openai_api_key="test-key", log_file=None)


@pytest.fixture
def page_and_locator():
    return make_page()


@pytest.fixture
def fake_session(page_and_locator) -> FakeSession:
    page, _ = page_and_locator
    return FakeSession(page=page)

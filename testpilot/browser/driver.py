"""
Playwright browser driver implementation.
"""

import asyncio
from typing import List, Optional

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from testpilot.browser.dialogs import DialogHandler, DialogMode
from testpilot.config.settings import get_settings
from testpilot.core.interfaces import BrowserSession
from testpilot.monitoring.logger import get_logger, log_performance_metric


class PlaywrightDriver(BrowserSession):
    """Playwright-based browser session: one browser, one context, one page."""

    def __init__(
        self,
        headless: Optional[bool] = None,
        user_agent: Optional[str] = None,
        viewport_width: Optional[int] = None,
        viewport_height: Optional[int] = None,
        timeout: Optional[int] = None,
    ) -> None:
        """
        Initialize the Playwright driver.

        Args:
            headless: Run browser in headless mode
            user_agent: User agent for the browser context
            viewport_width: Browser viewport width
            viewport_height: Browser viewport height
            timeout: Default timeout in milliseconds
        """
        settings = get_settings()
        self.headless = headless if headless is not None else settings.browser_headless
        self.user_agent = user_agent or settings.browser_user_agent
        self.viewport_width = viewport_width or settings.browser_viewport_width
        self.viewport_height = viewport_height or settings.browser_viewport_height
        self.timeout = timeout or settings.browser_timeout
        self.navigation_timeout = settings.navigation_timeout_ms

        self.logger = get_logger("browser.driver")
        self._playwright = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self.dialog_handlers: List[DialogHandler] = []

    async def start(self) -> None:
        """Start the browser and create a page."""
        if self._playwright is None:
            self._playwright = await async_playwright().start()

        if self._browser is None:
            self.logger.info(
                "Starting browser",
                extra={
                    "headless": self.headless,
                    "viewport": f"{self.viewport_width}x{self.viewport_height}",
                },
            )
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=["--no-sandbox", "--disable-dev-shm-usage"],
            )

        if self._context is None:
            self._context = await self._browser.new_context(
                user_agent=self.user_agent,
                viewport={
                    "width": self.viewport_width,
                    "height": self.viewport_height,
                },
            )
            self._context.set_default_timeout(self.timeout)

        if self._page is None:
            self._page = await self._context.new_page()

    async def stop(self) -> None:
        """Stop the browser and cleanup resources.

        Every resource is released even if closing an earlier one fails, which
        happens routinely when the browser process has already died.
        """
        for handler in self.dialog_handlers:
            handler.expire()

        for name in ("_page", "_context", "_browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                self.logger.warning(
                    "Failed to close browser resource",
                    extra={"resource": name.lstrip("_"), "error": str(e)},
                )
            setattr(self, name, None)

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                self.logger.warning("Failed to stop Playwright", extra={"error": str(e)})
            self._playwright = None

        self.logger.info("Browser stopped")

    async def navigate(self, url: str, timeout_ms: Optional[int] = None) -> None:
        """Navigate to a URL and wait for network idle."""
        if not self._page:
            await self.start()

        self.logger.info("Navigating to URL", extra={"url": url})
        start_time = asyncio.get_running_loop().time()

        await self._page.goto(
            url,
            wait_until="networkidle",
            timeout=timeout_ms or self.navigation_timeout,
        )

        elapsed_ms = (asyncio.get_running_loop().time() - start_time) * 1000
        log_performance_metric("page_navigation", elapsed_ms, context={"url": url})

    async def screenshot(self) -> bytes:
        """Take a screenshot and return as bytes."""
        if not self._page:
            raise RuntimeError("Browser not started. Call start() first.")

        self.logger.debug("Taking screenshot")
        return await self._page.screenshot(type="png", full_page=False)

    def is_alive(self) -> bool:
        """Whether the page is open and the browser still connected."""
        if self._page is None or self._browser is None:
            return False
        return not self._page.is_closed() and self._browser.is_connected()

    def arm_dialog_handler(self, mode: DialogMode) -> DialogHandler:
        """
        Register a handler for the next dialog the page raises.

        A still-pending handler from an earlier step is expired and detached
        so a single dialog is never answered twice.
        """
        if not self._page:
            raise RuntimeError("Browser not started. Call start() first.")

        for previous in self.dialog_handlers:
            if previous.pending:
                previous.expire()
                self._page.remove_listener("dialog", previous)

        handler = DialogHandler(mode)
        self._page.once("dialog", handler)
        self.dialog_handlers.append(handler)

        self.logger.debug("Dialog handler armed", extra={"mode": mode.value})
        return handler

    @property
    def page(self) -> Optional[Page]:
        """Get the current page object."""
        return self._page

"""
Action dispatcher: turns one typed test step into a concrete Playwright call.

Every handler receives the step's target and description and returns a
terminal ``StepOutcome``. Handlers raise on locator, timeout and parameter
errors; the executor converts those into failed results.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, Optional, Tuple

from playwright.async_api import Error as PlaywrightError

from testpilot.browser.dialogs import DialogMode
from testpilot.config.settings import Settings, get_settings
from testpilot.core.interfaces import BrowserSession
from testpilot.core.types import ExecutionStatus, SupportedAction
from testpilot.error_handling.exceptions import QuotedTextMissingError, StepParameterError
from testpilot.execution.parsing import parse_quoted_text, parse_timeout_ms, parse_viewport
from testpilot.monitoring.logger import get_logger

if TYPE_CHECKING:
    from playwright.async_api import Locator, Page

logger = get_logger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    """Terminal status of one step and optional diagnostic text."""

    status: ExecutionStatus
    details: Optional[str] = None

    @classmethod
    def passed(cls, details: Optional[str] = None) -> "StepOutcome":
        return cls(ExecutionStatus.PASS, details)

    @classmethod
    def failed(cls, details: str) -> "StepOutcome":
        return cls(ExecutionStatus.FAIL, details)


Handler = Callable[[str, str], Awaitable[StepOutcome]]


class ActionDispatcher:
    """Executes supported actions against the page of one browser session."""

    def __init__(self, session: BrowserSession, settings: Optional[Settings] = None) -> None:
        self.session = session
        self.settings = settings or get_settings()

        self.action_timeout = self.settings.action_timeout_ms
        self.short_timeout = self.settings.short_action_timeout_ms
        self.navigation_timeout = self.settings.navigation_timeout_ms

        self._handlers: Dict[SupportedAction, Handler] = {
            SupportedAction.CLICK: self._click,
            SupportedAction.DBLCLICK: self._dblclick,
            SupportedAction.TYPE: self._type,
            SupportedAction.FILL: self._fill,
            SupportedAction.NAVIGATE: self._navigate,
            SupportedAction.PRESS: self._press,
            SupportedAction.CHECK: self._check,
            SupportedAction.UNCHECK: self._uncheck,
            SupportedAction.HOVER: self._hover,
            SupportedAction.SELECT_OPTION: self._select_option,
            SupportedAction.FOCUS: self._focus,
            SupportedAction.RELOAD: self._reload,
            SupportedAction.GO_BACK: self._go_back,
            SupportedAction.GO_FORWARD: self._go_forward,
            SupportedAction.WAIT_FOR_TIMEOUT: self._wait_for_timeout,
            SupportedAction.WAIT_FOR_SELECTOR: self._wait_for_selector,
            SupportedAction.ACCEPT_DIALOG: self._accept_dialog,
            SupportedAction.DISMISS_DIALOG: self._dismiss_dialog,
            SupportedAction.SCROLL_TO_BOTTOM: self._scroll_to_bottom,
            SupportedAction.SCROLL_TO_TOP: self._scroll_to_top,
            SupportedAction.SCROLL_TO_ELEMENT: self._scroll_to_element,
            SupportedAction.SET_VIEWPORT: self._set_viewport,
            SupportedAction.CHECK_VISIBILITY: self._check_visibility,
            SupportedAction.CHECK_TEXT: self._check_text,
            SupportedAction.CHECK_URL: self._check_url,
        }

    async def dispatch(
        self, action: SupportedAction, target: str, description: str
    ) -> StepOutcome:
        """
        Run one action.

        Args:
            action: Action to perform
            target: Selector, URL, key, duration or dimensions
            description: Step description, also the source of quoted values

        Returns:
            Outcome of the action
        """
        handler = self._handlers[action]
        logger.debug(
            "Dispatching action",
            extra={"action": action.value, "target": target},
        )
        return await handler(target or "", description or "")

    @property
    def page(self) -> "Page":
        page = self.session.page
        if page is None:
            raise RuntimeError("Browser not started. Call start() first.")
        return page

    def _locator(self, target: str) -> "Locator":
        return self.page.locator(target)

    def _input_text(self, description: str) -> Tuple[str, Optional[str]]:
        """Text for type/fill steps, falling back to the configured literal."""
        quoted = parse_quoted_text(description)
        if quoted is not None:
            return quoted.value, None

        fallback = self.settings.fallback_input_text
        logger.warning(
            "No quoted text in description, using fallback input",
            extra={"description": description},
        )
        return fallback, f"No quoted text found in description; entered fallback text '{fallback}'."

    # Element interactions

    async def _click(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).click(timeout=self.action_timeout)
        return StepOutcome.passed()

    async def _dblclick(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).dblclick(timeout=self.action_timeout)
        return StepOutcome.passed()

    async def _type(self, target: str, description: str) -> StepOutcome:
        text, note = self._input_text(description)
        logger.info("Typing text", extra={"target": target, "length": len(text)})
        await self._locator(target).press_sequentially(
            text, delay=self.settings.type_delay_ms, timeout=self.action_timeout
        )
        return StepOutcome.passed(note)

    async def _fill(self, target: str, description: str) -> StepOutcome:
        text, note = self._input_text(description)
        logger.info("Filling text", extra={"target": target, "length": len(text)})
        await self._locator(target).fill(text, timeout=self.action_timeout)
        return StepOutcome.passed(note)

    async def _check(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).check(timeout=self.action_timeout)
        return StepOutcome.passed()

    async def _uncheck(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).uncheck(timeout=self.action_timeout)
        return StepOutcome.passed()

    async def _hover(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).hover(timeout=self.short_timeout)
        return StepOutcome.passed()

    async def _focus(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).focus(timeout=self.short_timeout)
        return StepOutcome.passed()

    async def _select_option(self, target: str, description: str) -> StepOutcome:
        quoted = parse_quoted_text(description)
        if quoted is not None:
            option = quoted.value
        else:
            logger.warning(
                "selectOption description has no quoted value, trying target as value",
                extra={"target": target},
            )
            option = target

        if not option:
            raise StepParameterError(
                "Could not determine option to select from description for 'selectOption'.",
                action=SupportedAction.SELECT_OPTION.value,
                value=description,
            )

        locator = self._locator(target)
        try:
            await locator.select_option(option, timeout=self.action_timeout)
        except PlaywrightError:
            logger.warning(
                "Select by value/label failed, retrying by explicit label",
                extra={"option": option},
            )
            await locator.select_option(label=option, timeout=self.action_timeout)
        return StepOutcome.passed()

    async def _scroll_to_element(self, target: str, description: str) -> StepOutcome:
        await self._locator(target).scroll_into_view_if_needed(timeout=self.short_timeout)
        return StepOutcome.passed()

    async def _wait_for_selector(self, target: str, description: str) -> StepOutcome:
        await self.page.wait_for_selector(target, state="visible", timeout=self.action_timeout)
        return StepOutcome.passed()

    # Page-level actions

    async def _navigate(self, target: str, description: str) -> StepOutcome:
        await self.page.goto(target, wait_until="networkidle", timeout=self.navigation_timeout)
        return StepOutcome.passed()

    async def _reload(self, target: str, description: str) -> StepOutcome:
        await self.page.reload(wait_until="networkidle", timeout=self.navigation_timeout)
        return StepOutcome.passed()

    async def _go_back(self, target: str, description: str) -> StepOutcome:
        await self.page.go_back(wait_until="networkidle", timeout=self.navigation_timeout)
        return StepOutcome.passed()

    async def _go_forward(self, target: str, description: str) -> StepOutcome:
        await self.page.go_forward(wait_until="networkidle", timeout=self.navigation_timeout)
        return StepOutcome.passed()

    async def _press(self, target: str, description: str) -> StepOutcome:
        await self.page.keyboard.press(target)
        return StepOutcome.passed()

    async def _wait_for_timeout(self, target: str, description: str) -> StepOutcome:
        await self.page.wait_for_timeout(parse_timeout_ms(target))
        return StepOutcome.passed()

    async def _scroll_to_bottom(self, target: str, description: str) -> StepOutcome:
        await self.page.evaluate("window.scrollTo(0, document.body.scrollHeight)")
        return StepOutcome.passed()

    async def _scroll_to_top(self, target: str, description: str) -> StepOutcome:
        await self.page.evaluate("window.scrollTo(0, 0)")
        return StepOutcome.passed()

    async def _set_viewport(self, target: str, description: str) -> StepOutcome:
        width, height = parse_viewport(target)
        await self.page.set_viewport_size({"width": width, "height": height})
        return StepOutcome.passed()

    async def _accept_dialog(self, target: str, description: str) -> StepOutcome:
        self.session.arm_dialog_handler(DialogMode.ACCEPT)
        return StepOutcome.passed("Listener for accepting next dialog is active.")

    async def _dismiss_dialog(self, target: str, description: str) -> StepOutcome:
        self.session.arm_dialog_handler(DialogMode.DISMISS)
        return StepOutcome.passed("Listener for dismissing next dialog is active.")

    # Assertions

    async def _check_visibility(self, target: str, description: str) -> StepOutcome:
        if await self._locator(target).is_visible():
            return StepOutcome.passed()
        return StepOutcome.failed(f"Element '{target}' was not visible.")

    async def _check_text(self, target: str, description: str) -> StepOutcome:
        quoted = parse_quoted_text(description)
        if quoted is None:
            raise QuotedTextMissingError(SupportedAction.CHECK_TEXT.value, description)

        expected = quoted.value
        actual = await self._locator(target).text_content(timeout=self.short_timeout)
        if actual is not None and expected in actual:
            return StepOutcome.passed()
        return StepOutcome.failed(
            f"Element '{target}' did not contain text '{expected}'. Actual text: \"{actual}\""
        )

    async def _check_url(self, target: str, description: str) -> StepOutcome:
        current_url = self.page.url
        if target in current_url:
            return StepOutcome.passed()
        return StepOutcome.failed(
            f"Current URL '{current_url}' did not contain target '{target}'."
        )

"""Scenario generator.

Fetches the markup of a page with a dedicated browser session and asks the
model for test scenarios, which are validated before anyone else sees them.
"""

from typing import Callable, List, Optional
from urllib.parse import urlparse

import openai

from testpilot.browser.driver import PlaywrightDriver
from testpilot.config.prompts import (
    SCENARIO_GENERATOR_SYSTEM_PROMPT,
    build_generation_message,
)
from testpilot.config.settings import Settings, get_settings
from testpilot.core.interfaces import BrowserSession, ScenarioGenerator
from testpilot.core.types import Scenario
from testpilot.core.validation import validate_scenarios
from testpilot.error_handling.exceptions import GenerationError, StepValidationError
from testpilot.models.openai_client import OpenAIClient
from testpilot.monitoring.logger import get_logger

logger = get_logger(__name__)

SessionFactory = Callable[[], BrowserSession]


def is_valid_url(url: str) -> bool:
    """Only absolute http(s) URLs with a host are accepted."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class PageScenarioGenerator(ScenarioGenerator):
    """
    Generates scenarios for a web page from its DOM.

    The DOM is fetched in a browser session owned by the generator, never the
    one used for execution.
    """

    def __init__(
        self,
        client: Optional[OpenAIClient] = None,
        session_factory: Optional[SessionFactory] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client
        self._session_factory = session_factory or (lambda: PlaywrightDriver(headless=True))

    @property
    def client(self) -> OpenAIClient:
        """Lazy-load OpenAI client."""
        if self._client is None:
            self._client = OpenAIClient(model=self.settings.openai_model)
        return self._client

    async def generate(self, url: str) -> List[Scenario]:
        if not is_valid_url(url):
            raise GenerationError("Invalid URL format.", url=url)

        logger.info("Generating scenarios", extra={"url": url})
        dom_content = await self.fetch_dom(url)

        if len(dom_content) > self.settings.max_dom_characters:
            logger.warning(
                "Truncating DOM content",
                extra={
                    "original_length": len(dom_content),
                    "max_length": self.settings.max_dom_characters,
                },
            )
            dom_content = dom_content[: self.settings.max_dom_characters]

        try:
            response = await self.client.call(
                messages=[
                    {"role": "user", "content": build_generation_message(url, dom_content)}
                ],
                system_prompt=SCENARIO_GENERATOR_SYSTEM_PROMPT,
                temperature=self.settings.openai_temperature,
                response_format={"type": "json_object"},
            )
        except openai.APIError as e:
            raise GenerationError(
                f"Failed to communicate with the AI service: {e}", url=url, cause=e
            ) from e

        content = response.get("content")
        if isinstance(content, dict) and "error" in content and "scenarios" not in content:
            raise GenerationError(
                "Failed to generate test scenarios. The AI returned an unexpected response.",
                url=url,
            )

        try:
            scenarios, quarantined = validate_scenarios(content)
        except StepValidationError as e:
            raise GenerationError(
                "Failed to generate test scenarios. The AI returned an unexpected response.",
                url=url,
                cause=e,
            ) from e

        if not scenarios:
            raise GenerationError("No usable test scenarios were generated.", url=url)

        usage = response.get("usage", {})
        logger.info(
            "Scenarios generated",
            extra={
                "url": url,
                "scenario_count": len(scenarios),
                "step_count": sum(len(s.test_steps) for s in scenarios),
                "quarantined_steps": len(quarantined),
                "total_tokens": usage.get("total_tokens", 0),
            },
        )
        return scenarios

    async def fetch_dom(self, url: str) -> str:
        """Load the page in a fresh session and return its rendered markup."""
        session = self._session_factory()
        try:
            await session.start()
            await session.navigate(url, timeout_ms=self.settings.dom_fetch_timeout_ms)
            page = session.page
            await page.wait_for_timeout(self.settings.dom_settle_ms)
            content = await page.content()
        except Exception as e:
            logger.error("DOM fetch failed", extra={"url": url, "error": str(e)})
            raise GenerationError(
                f"Failed to navigate to URL for DOM fetching: {url}. "
                "The site might be down or blocking automated access.",
                url=url,
                cause=e,
            ) from e
        finally:
            try:
                await session.stop()
            except Exception as e:
                logger.warning("Failed to close DOM fetch session", extra={"error": str(e)})

        logger.debug("DOM fetched", extra={"url": url, "length": len(content)})
        return content


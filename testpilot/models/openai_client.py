"""OpenAI API client wrapper for the TestPilot framework."""

import json
import logging
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from testpilot.config.settings import get_settings


class OpenAIClient:
    """Wrapper for OpenAI chat completion calls."""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        max_retries: Optional[int] = None,
        request_timeout: Optional[float] = None,
    ) -> None:
        """
        Initialize OpenAI client.

        Args:
            model: Model to use for completions
            api_key: Optional API key (defaults to env/config)
            max_retries: Maximum number of retry attempts
            request_timeout: Per-request timeout in seconds
        """
        settings = get_settings()
        self.model = model or settings.openai_model
        self.max_retries = max_retries or settings.openai_max_retries
        self.api_key = api_key or settings.openai_api_key
        self.request_timeout = request_timeout or float(
            settings.openai_request_timeout_seconds
        )
        self.logger = logging.getLogger("openai_client")

        if not self.api_key:
            raise ValueError(
                "OpenAI API key not provided. Set OPENAI_API_KEY environment variable."
            )

        self.client = AsyncOpenAI(
            api_key=self.api_key,
            max_retries=self.max_retries,
        )

    async def call(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
        system_prompt: Optional[str] = None,
        response_format: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Make a call to the OpenAI API."""
        final_messages = []
        if system_prompt:
            final_messages.append({"role": "system", "content": system_prompt})
        final_messages.extend(messages)

        self.logger.debug(
            f"OpenAI API call: model={self.model}, "
            f"messages={len(final_messages)}, temperature={temperature}"
        )

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": final_messages,
            "temperature": temperature,
        }
        if max_tokens:
            kwargs["max_completion_tokens"] = max_tokens
        if response_format:
            kwargs["response_format"] = response_format

        try:
            response = await self.client.chat.completions.create(
                timeout=self.request_timeout,
                **kwargs,
            )
        except openai.APIError as e:
            self.logger.error(f"OpenAI API error: {e}")
            raise

        content: Any = response.choices[0].message.content
        if response_format and response_format.get("type") == "json_object":
            try:
                content = json.loads(content or "{}")
            except json.JSONDecodeError as exc:
                self.logger.error(f"Failed to parse JSON response: {exc}")
                content = {"error": "Invalid JSON response", "raw": content}

        usage = response.usage
        return {
            "content": content,
            "usage": {
                "prompt_tokens": getattr(usage, "prompt_tokens", 0),
                "completion_tokens": getattr(usage, "completion_tokens", 0),
                "total_tokens": getattr(usage, "total_tokens", 0),
            },
            "model": response.model,
            "finish_reason": response.choices[0].finish_reason,
        }

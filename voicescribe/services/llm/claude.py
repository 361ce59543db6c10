"""
Claude LLM provider implementation.

Uses the Anthropic Python SDK (``anthropic.AsyncAnthropic``) to interact with
the Claude API. Concurrency is capped with a semaphore. Calls are not retried:
a repeated request is a second billable call, so failures surface to the
caller as standard Python exceptions.
"""

import asyncio
import logging

from anthropic import (
    APIConnectionError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)

from voicescribe.core.config import get_settings
from voicescribe.core.models import ContentFragment, FragmentSequence
from voicescribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class ClaudeLLM(BaseLLM):
    """Claude API LLM provider with a rate-limit semaphore."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.3,
        max_concurrent: int = 5,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._client = AsyncAnthropic(api_key=self._api_key)

    @staticmethod
    def _split_system(messages: list[dict[str, str]]) -> tuple[str | None, list[dict[str, str]]]:
        """Claude takes the system prompt as a separate argument."""
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        chat = [m for m in messages if m["role"] != "system"]
        return ("\n\n".join(system_parts) or None), chat

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> FragmentSequence:
        """Send a request to Claude, respecting the concurrency semaphore.

        All SDK exceptions are translated to standard Python exceptions so that
        stage executors do not depend on the Anthropic SDK.
        """
        system, chat_messages = self._split_system(messages)
        temperature = kwargs.get("temperature")
        request: dict = {
            "model": self._model,
            "max_tokens": kwargs.get("max_tokens") or self._max_tokens,
            "temperature": temperature if temperature is not None else self._temperature,
            "messages": chat_messages,
        }
        if system:
            request["system"] = system

        async with self._semaphore:
            try:
                response = await self._client.messages.create(**request)
            except APITimeoutError as exc:
                logger.warning("Claude API timeout: %s", exc)
                raise TimeoutError(f"Claude API request timed out: {exc}") from exc
            except APIConnectionError as exc:
                logger.warning("Claude API connection error: %s", exc)
                raise ConnectionError(f"Failed to connect to Claude API: {exc}") from exc
            except RateLimitError as exc:
                logger.warning("Claude API rate limit hit: %s", exc)
                raise ConnectionError(f"Claude API rate limit exceeded: {exc}") from exc
            except Exception as exc:
                logger.error("Unexpected Claude API error: %s", exc)
                raise RuntimeError(f"Claude API error: {exc}") from exc

        return FragmentSequence(
            fragments=[
                ContentFragment(type=block.type, text=getattr(block, "text", None))
                for block in response.content
            ]
        )

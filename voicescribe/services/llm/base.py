"""
Abstract base class for LLM providers.

All LLM implementations (Claude, Ollama, etc.) must implement this interface,
enabling provider-agnostic stage executors. Providers return the raw payload
shape they received (``PlainText`` or ``FragmentSequence``); turning that
into a single string is the normalizer's job.
"""

from abc import ABC, abstractmethod

from voicescribe.core.models import FragmentSequence, PlainText


class BaseLLM(ABC):
    """Interface that every LLM provider must implement."""

    @abstractmethod
    async def chat(
        self, messages: list[dict[str, str]], **kwargs
    ) -> PlainText | FragmentSequence:
        """Send role-tagged messages and return the model's payload.

        Args:
            messages: Ordered ``{"role": "system"|"user", "content": ...}`` dicts.
            **kwargs: Provider-specific options (temperature, max_tokens, etc.).

        Returns:
            The response payload, either a plain string or a fragment sequence.

        Raises:
            ConnectionError: The provider could not be reached or rate-limited us.
            TimeoutError: The provider did not answer in time.
            RuntimeError: Any other provider failure.
        """

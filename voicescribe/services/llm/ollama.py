"""
Ollama LLM provider implementation.

Uses the Ollama Python SDK (``ollama.AsyncClient``) to talk to an Ollama
server reachable over HTTP. Chat responses arrive as a single string.
"""

import logging

from ollama import AsyncClient, ResponseError

from voicescribe.core.config import get_settings
from voicescribe.core.models import PlainText
from voicescribe.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class OllamaLLM(BaseLLM):
    """Ollama LLM provider.

    Connects to an Ollama server via its REST API. Failures are translated
    to standard exceptions and never retried here.
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.3,
    ) -> None:
        """Initialize the Ollama LLM provider.

        Args:
            base_url: Ollama server URL (falls back to settings if not provided).
            model: Model name to use (e.g. "llama3.2").
            temperature: Sampling temperature for text generation (0.0–1.0).
        """
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._temperature = temperature
        self._client = AsyncClient(host=self._base_url)

    async def chat(self, messages: list[dict[str, str]], **kwargs) -> PlainText:
        """Send a chat request to the Ollama server."""
        temperature = kwargs.get("temperature")
        try:
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options={
                    "temperature": temperature if temperature is not None else self._temperature
                },
            )
        except ConnectionError as exc:
            logger.warning("Ollama connection error (%s): %s", self._base_url, exc)
            raise ConnectionError(
                f"Failed to connect to Ollama at {self._base_url}: {exc}"
            ) from exc
        except TimeoutError as exc:
            logger.warning("Ollama timeout (%s): %s", self._base_url, exc)
            raise TimeoutError(f"Ollama request timed out ({self._base_url}): {exc}") from exc
        except ResponseError as exc:
            logger.error("Ollama response error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Ollama error: %s", exc)
            raise RuntimeError(f"Ollama error: {exc}") from exc

        return PlainText(text=response.message.content or "")

"""Unit tests for OllamaLLM provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from ollama import ResponseError

from voicescribe.core.models import PlainText
from voicescribe.services.llm.ollama import OllamaLLM

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_chat_response(text: str | None):
    """Build a minimal object that looks like ``ollama.ChatResponse``."""
    return SimpleNamespace(message=SimpleNamespace(content=text))


def _mock_settings(**overrides):
    """Return a fake Settings object with sensible defaults."""
    defaults = {
        "ollama_base_url": "http://localhost:11434",
        "ollama_model": "llama3.2",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


MESSAGES = [{"role": "user", "content": "Summarize this."}]

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client():
    """Return an ``AsyncMock`` mimicking ``ollama.AsyncClient``."""
    client = AsyncMock()
    client.chat = AsyncMock(return_value=_make_chat_response("A summary."))
    return client


@pytest.fixture
def llm(mock_client):
    """Create an OllamaLLM with a mocked Ollama client."""
    with patch("voicescribe.services.llm.ollama.get_settings", return_value=_mock_settings()):
        with patch("voicescribe.services.llm.ollama.AsyncClient", return_value=mock_client):
            instance = OllamaLLM()
    return instance


class TestOllamaLLMInit:
    def test_defaults_from_settings(self):
        with patch("voicescribe.services.llm.ollama.get_settings", return_value=_mock_settings()):
            with patch("voicescribe.services.llm.ollama.AsyncClient") as mock_cls:
                llm = OllamaLLM()

        assert llm._base_url == "http://localhost:11434"
        assert llm._model == "llama3.2"
        mock_cls.assert_called_once_with(host="http://localhost:11434")

    def test_explicit_args_override_settings(self):
        with patch("voicescribe.services.llm.ollama.get_settings", return_value=_mock_settings()):
            with patch("voicescribe.services.llm.ollama.AsyncClient"):
                llm = OllamaLLM(base_url="http://gpu:11434", model="qwen2.5", temperature=0.7)

        assert llm._base_url == "http://gpu:11434"
        assert llm._model == "qwen2.5"
        assert llm._temperature == 0.7


class TestChat:
    async def test_returns_plain_text(self, llm):
        result = await llm.chat(MESSAGES)
        assert result == PlainText(text="A summary.")

    async def test_passes_model_and_temperature(self, llm, mock_client):
        await llm.chat(MESSAGES, temperature=0.1)

        call_kwargs = mock_client.chat.call_args.kwargs
        assert call_kwargs["model"] == "llama3.2"
        assert call_kwargs["messages"] == MESSAGES
        assert call_kwargs["options"] == {"temperature": 0.1}

    async def test_missing_content_is_empty_text(self, llm, mock_client):
        mock_client.chat.return_value = _make_chat_response(None)
        assert (await llm.chat(MESSAGES)).text == ""


class TestErrorHandling:
    async def test_connection_error(self, llm, mock_client):
        mock_client.chat.side_effect = ConnectionError("Connection refused")

        with pytest.raises(ConnectionError, match="Failed to connect to Ollama"):
            await llm.chat(MESSAGES)

    async def test_timeout_error(self, llm, mock_client):
        mock_client.chat.side_effect = TimeoutError("Request timed out")

        with pytest.raises(TimeoutError, match="timed out"):
            await llm.chat(MESSAGES)

    async def test_response_error(self, llm, mock_client):
        mock_client.chat.side_effect = ResponseError("model not found")

        with pytest.raises(RuntimeError, match="Ollama error"):
            await llm.chat(MESSAGES)

    async def test_unexpected_error(self, llm, mock_client):
        mock_client.chat.side_effect = ValueError("something weird")

        with pytest.raises(RuntimeError, match="Ollama error"):
            await llm.chat(MESSAGES)

"""Unit tests for ClaudeLLM provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from anthropic import APIConnectionError, APITimeoutError, RateLimitError

from voicescribe.core.models import FragmentSequence
from voicescribe.services.llm.claude import ClaudeLLM
from voicescribe.services.pipeline.normalizer import normalize_content

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_message_response(*texts: str):
    """Build a minimal object that looks like ``anthropic.types.Message``."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


def _mock_settings(**overrides):
    """Return a fake Settings object with sensible defaults."""
    defaults = {
        "claude_api_key": "sk-test-key",
        "claude_model": "claude-sonnet-4-20250514",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


MESSAGES = [
    {"role": "system", "content": "You are a professional translator."},
    {"role": "user", "content": "Translate the following text to Japanese: Hi."},
]

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client():
    """Return an ``AsyncMock`` mimicking ``AsyncAnthropic``."""
    client = AsyncMock()
    client.messages.create = AsyncMock(return_value=_make_message_response("こんにちは"))
    return client


@pytest.fixture
def llm(mock_client):
    """Create a ClaudeLLM with a mocked Anthropic client."""
    with patch("voicescribe.services.llm.claude.get_settings", return_value=_mock_settings()):
        with patch("voicescribe.services.llm.claude.AsyncAnthropic", return_value=mock_client):
            instance = ClaudeLLM()
    return instance


# ---------------------------------------------------------------------------
# TestClaudeLLMInit
# ---------------------------------------------------------------------------


class TestClaudeLLMInit:
    """Constructor / settings tests."""

    def test_defaults_from_settings(self):
        with patch("voicescribe.services.llm.claude.get_settings", return_value=_mock_settings()):
            with patch("voicescribe.services.llm.claude.AsyncAnthropic") as mock_cls:
                llm = ClaudeLLM()

        assert llm._api_key == "sk-test-key"
        assert llm._model == "claude-sonnet-4-20250514"
        mock_cls.assert_called_once_with(api_key="sk-test-key")

    def test_explicit_args_override_settings(self):
        with patch("voicescribe.services.llm.claude.get_settings", return_value=_mock_settings()):
            with patch("voicescribe.services.llm.claude.AsyncAnthropic"):
                llm = ClaudeLLM(api_key="sk-custom", model="claude-x", max_tokens=512)

        assert llm._api_key == "sk-custom"
        assert llm._model == "claude-x"
        assert llm._max_tokens == 512


# ---------------------------------------------------------------------------
# TestChat
# ---------------------------------------------------------------------------


class TestChat:
    """Tests for ``chat()``."""

    async def test_returns_fragment_sequence(self, llm, mock_client):
        mock_client.messages.create.return_value = _make_message_response("Hello ", "world")

        result = await llm.chat(MESSAGES)

        assert isinstance(result, FragmentSequence)
        assert normalize_content(result) == "Hello world"

    async def test_system_message_passed_separately(self, llm, mock_client):
        await llm.chat(MESSAGES)

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["system"] == "You are a professional translator."
        assert call_kwargs["messages"] == [MESSAGES[1]]

    async def test_no_system_kwarg_omitted(self, llm, mock_client):
        await llm.chat([MESSAGES[1]])

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert "system" not in call_kwargs

    async def test_forwards_options(self, llm, mock_client):
        await llm.chat(MESSAGES, temperature=0.0, max_tokens=256)

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["temperature"] == 0.0
        assert call_kwargs["max_tokens"] == 256

    async def test_non_text_blocks_kept_as_typed_fragments(self, llm, mock_client):
        mock_client.messages.create.return_value = SimpleNamespace(
            content=[
                SimpleNamespace(type="thinking", thinking="..."),
                SimpleNamespace(type="text", text="answer"),
            ]
        )

        result = await llm.chat(MESSAGES)

        assert [f.type for f in result.fragments] == ["thinking", "text"]
        assert result.fragments[0].text is None
        assert normalize_content(result) == "answer"


# ---------------------------------------------------------------------------
# TestErrorHandling
# ---------------------------------------------------------------------------


class TestErrorHandling:
    """Tests for exception translation."""

    async def test_connection_error(self, llm, mock_client):
        mock_client.messages.create.side_effect = APIConnectionError(request=MagicMock())

        with pytest.raises(ConnectionError, match="Failed to connect"):
            await llm.chat(MESSAGES)

    async def test_timeout_error(self, llm, mock_client):
        mock_client.messages.create.side_effect = APITimeoutError(request=MagicMock())

        with pytest.raises(TimeoutError, match="timed out"):
            await llm.chat(MESSAGES)

    async def test_rate_limit_error(self, llm, mock_client):
        mock_client.messages.create.side_effect = RateLimitError(
            message="Rate limit exceeded",
            response=MagicMock(status_code=429, headers={}),
            body={"error": {"message": "rate limited"}},
        )

        with pytest.raises(ConnectionError, match="rate limit"):
            await llm.chat(MESSAGES)

    async def test_unexpected_error(self, llm, mock_client):
        mock_client.messages.create.side_effect = ValueError("something weird")

        with pytest.raises(RuntimeError, match="Claude API error"):
            await llm.chat(MESSAGES)

    async def test_not_retried(self, llm, mock_client):
        mock_client.messages.create.side_effect = APIConnectionError(request=MagicMock())

        with pytest.raises(ConnectionError):
            await llm.chat(MESSAGES)

        assert mock_client.messages.create.await_count == 1

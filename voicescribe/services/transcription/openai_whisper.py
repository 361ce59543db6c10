"""Whisper STT through the OpenAI audio transcription API.

Sends the whole recording in one request with ``response_format="verbose_json"``
so the response carries the detected language and the audio duration.
"""

import logging

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError

from voicescribe.core.config import get_settings
from voicescribe.core.models import TranscriptionResult
from voicescribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


# Whisper reports the detected language by its English name; map it back to the
# ISO 639-1 code used everywhere else (Whisper's own language table).
WHISPER_LANGUAGE_CODES: dict[str, str] = {
    "english": "en", "chinese": "zh", "german": "de", "spanish": "es", "russian": "ru",
    "korean": "ko", "french": "fr", "japanese": "ja", "portuguese": "pt", "turkish": "tr",
    "polish": "pl", "catalan": "ca", "dutch": "nl", "arabic": "ar", "swedish": "sv",
    "italian": "it", "indonesian": "id", "hindi": "hi", "finnish": "fi", "vietnamese": "vi",
    "hebrew": "he", "ukrainian": "uk", "greek": "el", "malay": "ms", "czech": "cs",
    "romanian": "ro", "danish": "da", "hungarian": "hu", "tamil": "ta", "norwegian": "no",
    "thai": "th", "urdu": "ur", "croatian": "hr", "bulgarian": "bg", "lithuanian": "lt",
    "latin": "la", "maori": "mi", "malayalam": "ml", "welsh": "cy", "slovak": "sk",
    "telugu": "te", "persian": "fa", "latvian": "lv", "bengali": "bn", "serbian": "sr",
    "azerbaijani": "az", "slovenian": "sl", "kannada": "kn", "estonian": "et",
    "macedonian": "mk", "breton": "br", "basque": "eu", "icelandic": "is", "armenian": "hy",
    "nepali": "ne", "mongolian": "mn", "bosnian": "bs", "kazakh": "kk", "albanian": "sq",
    "swahili": "sw", "galician": "gl", "marathi": "mr", "punjabi": "pa", "sinhala": "si",
    "khmer": "km", "shona": "sn", "yoruba": "yo", "somali": "so", "afrikaans": "af",
    "occitan": "oc", "georgian": "ka", "belarusian": "be", "tajik": "tg", "sindhi": "sd",
    "gujarati": "gu", "amharic": "am", "yiddish": "yi", "lao": "lo", "uzbek": "uz",
    "faroese": "fo", "haitian creole": "ht", "pashto": "ps", "turkmen": "tk",
    "nynorsk": "nn", "maltese": "mt", "sanskrit": "sa", "luxembourgish": "lb",
    "myanmar": "my", "tibetan": "bo", "tagalog": "tl", "malagasy": "mg", "assamese": "as",
    "tatar": "tt", "hawaiian": "haw", "lingala": "ln", "hausa": "ha", "bashkir": "ba",
    "javanese": "jw", "sundanese": "su", "cantonese": "yue",
}
_WHISPER_CODES = frozenset(WHISPER_LANGUAGE_CODES.values())


def language_code(detected: str | None) -> str | None:
    """Return the language code for a Whisper-reported language, or ``None``.

    Accepts either the English name Whisper returns ("english") or a code.
    """
    if not detected:
        return None
    value = detected.strip().lower()
    if value in _WHISPER_CODES:
        return value
    return WHISPER_LANGUAGE_CODES.get(value)


class OpenAIWhisperSTT(BaseSTT):
    """Speech-to-text provider backed by the hosted Whisper model.

    Args:
        api_key: OpenAI API key (falls back to settings).
        model: Transcription model name (falls back to settings).
    """

    def __init__(self, api_key: str | None = None, model: str | None = None) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_stt_model
        self._client = AsyncOpenAI(api_key=self._api_key)

    async def transcribe(
        self,
        audio: bytes,
        filename: str,
        language: str | None = None,
        **kwargs,
    ) -> TranscriptionResult:
        """Transcribe an encoded audio file.

        Raises:
            ConnectionError: Network failure or rate limit.
            TimeoutError: The API did not answer in time.
            RuntimeError: Any other API failure.
        """
        request: dict = {
            "model": self._model,
            "file": (filename, audio),
            "response_format": "verbose_json",
        }
        if language:
            request["language"] = language

        logger.debug("Whisper request: %s (%d bytes, language=%s)", filename, len(audio), language)
        try:
            response = await self._client.audio.transcriptions.create(**request)
        except APITimeoutError as exc:
            logger.warning("Whisper API timeout: %s", exc)
            raise TimeoutError(f"Whisper API request timed out: {exc}") from exc
        except APIConnectionError as exc:
            logger.warning("Whisper API connection error: %s", exc)
            raise ConnectionError(f"Failed to connect to Whisper API: {exc}") from exc
        except RateLimitError as exc:
            logger.warning("Whisper API rate limit hit: %s", exc)
            raise ConnectionError(f"Whisper API rate limit exceeded: {exc}") from exc
        except Exception as exc:
            logger.error("Unexpected Whisper API error: %s", exc)
            raise RuntimeError(f"Whisper API error: {exc}") from exc

        return TranscriptionResult(
            text=(getattr(response, "text", "") or "").strip(),
            language=language_code(getattr(response, "language", None)) or language or "unknown",
            duration=float(getattr(response, "duration", 0.0) or 0.0),
        )

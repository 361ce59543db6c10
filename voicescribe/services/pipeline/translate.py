"""Translate stage: render transcription text in a target language."""

import logging

from voicescribe.core.exceptions import TranslationError
from voicescribe.core.models import TranslationResult
from voicescribe.services.llm.base import BaseLLM
from voicescribe.services.pipeline.base import BaseStage
from voicescribe.services.pipeline.normalizer import normalize_content
from voicescribe.services.pipeline.prompts import build_translate_messages

logger = logging.getLogger(__name__)


class TranslateStage(BaseStage):
    """Translates text with the configured LLM provider."""

    error_cls = TranslationError

    def __init__(self, llm: BaseLLM) -> None:
        self._llm = llm

    async def run(
        self,
        text: str,
        target_language: str,
        context: str | None = None,
    ) -> TranslationResult:
        if not text.strip():
            raise TranslationError("Nothing to translate")

        messages = build_translate_messages(text, target_language, context)
        try:
            content = await self._llm.chat(messages)
            translation = normalize_content(content)
        except Exception as exc:
            raise self.wrap(exc) from exc

        logger.info("Translated %d chars to %s", len(text), target_language)
        return TranslationResult(translation=translation.strip(), target_language=target_language)

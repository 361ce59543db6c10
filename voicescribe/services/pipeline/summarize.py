"""Summarize stage: depth-specific summary of transcription text."""

import logging

from voicescribe.core.exceptions import SummaryError
from voicescribe.core.models import SummaryResult, SummaryType
from voicescribe.services.llm.base import BaseLLM
from voicescribe.services.pipeline.base import BaseStage
from voicescribe.services.pipeline.normalizer import PreambleStripper, normalize_content
from voicescribe.services.pipeline.prompts import build_summary_messages

logger = logging.getLogger(__name__)


class SummarizeStage(BaseStage):
    """Summarizes text and strips any acknowledgment preamble from the output.

    Args:
        llm: LLM provider.
        stripper: Preamble stripper; defaults to the built-in pattern set.
    """

    error_cls = SummaryError

    def __init__(self, llm: BaseLLM, stripper: PreambleStripper | None = None) -> None:
        self._llm = llm
        self._stripper = stripper or PreambleStripper()

    async def run(
        self,
        text: str,
        summary_type: SummaryType = SummaryType.medium,
        language: str = "en",
    ) -> SummaryResult:
        if not text.strip():
            raise SummaryError("Nothing to summarize")

        try:
            summary_type = SummaryType(summary_type)
            messages = build_summary_messages(text, summary_type, language)
            content = await self._llm.chat(messages)
            summary = self._stripper.strip(normalize_content(content))
        except Exception as exc:
            raise self.wrap(exc) from exc

        if not summary:
            raise SummaryError("Summary was empty after removing the preamble")

        logger.info("Generated %s summary (%s, %d chars)", summary_type, language, len(summary))
        return SummaryResult(summary=summary, type=summary_type, language=language)

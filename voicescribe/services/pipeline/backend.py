"""
The four client procedures as one interface.

The orchestrator only talks to a ``StageBackend``. ``LocalStageBackend``
runs the stage executors in-process (used by the API server);
``voicescribe.client.APIClient`` implements the same interface over HTTP.
"""

from abc import ABC, abstractmethod

from voicescribe.core.config import Settings, get_settings
from voicescribe.core.models import (
    StoredAudioReference,
    SummaryResult,
    SummaryType,
    TranscriptionResult,
    TranslationResult,
)
from voicescribe.services.llm import create_llm
from voicescribe.services.pipeline.normalizer import PreambleStripper
from voicescribe.services.pipeline.summarize import SummarizeStage
from voicescribe.services.pipeline.transcribe import TranscribeStage
from voicescribe.services.pipeline.translate import TranslateStage
from voicescribe.services.pipeline.upload import UploadStage
from voicescribe.services.storage.blob import LocalBlobStorage
from voicescribe.services.transcription import create_stt


class StageBackend(ABC):
    """Upload, transcribe, translate and summarize, each a single call."""

    @abstractmethod
    async def upload_audio(self, data: bytes, mime_type: str) -> StoredAudioReference:
        """Persist audio bytes and return their locator."""

    @abstractmethod
    async def transcribe_audio(
        self, audio_url: str, language: str | None = None
    ) -> TranscriptionResult:
        """Transcribe the audio behind ``audio_url``."""

    @abstractmethod
    async def translate_text(
        self, text: str, target_language: str, context: str | None = None
    ) -> TranslationResult:
        """Translate ``text`` into ``target_language``."""

    @abstractmethod
    async def generate_summary(
        self, text: str, summary_type: SummaryType, language: str
    ) -> SummaryResult:
        """Summarize ``text`` at the requested depth."""


class LocalStageBackend(StageBackend):
    """Runs the stage executors in the current process."""

    def __init__(
        self,
        upload: UploadStage,
        transcribe: TranscribeStage,
        translate: TranslateStage,
        summarize: SummarizeStage,
    ) -> None:
        self.upload = upload
        self.transcribe = transcribe
        self.translate = translate
        self.summarize = summarize

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "LocalStageBackend":
        """Wire providers and storage from configuration."""
        settings = settings or get_settings()
        storage = LocalBlobStorage()
        llm = create_llm(provider=settings.llm_provider)
        stt = create_stt(provider=settings.stt_provider)
        return cls(
            upload=UploadStage(storage),
            transcribe=TranscribeStage(
                stt, storage=storage, keep_history=settings.history_enabled
            ),
            translate=TranslateStage(llm),
            summarize=SummarizeStage(llm, PreambleStripper(settings.preamble_patterns)),
        )

    async def upload_audio(self, data: bytes, mime_type: str) -> StoredAudioReference:
        return await self.upload.run(data, mime_type)

    async def transcribe_audio(
        self, audio_url: str, language: str | None = None
    ) -> TranscriptionResult:
        return await self.transcribe.run(audio_url, language)

    async def translate_text(
        self, text: str, target_language: str, context: str | None = None
    ) -> TranslationResult:
        return await self.translate.run(text, target_language, context)

    async def generate_summary(
        self, text: str, summary_type: SummaryType, language: str
    ) -> SummaryResult:
        return await self.summarize.run(text, summary_type, language)

"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the transcribe stage.
"""

from abc import ABC, abstractmethod

from voicescribe.core.models import TranscriptionResult


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(
        self,
        audio: bytes,
        filename: str,
        language: str | None = None,
        **kwargs,
    ) -> TranscriptionResult:
        """Transcribe one complete audio file.

        Args:
            audio: Encoded audio bytes (WAV, WebM, MP3, ...).
            filename: Name with an extension the provider can sniff the format from.
            language: Optional ISO 639-1 hint; ``None`` lets the provider detect it.
            **kwargs: Provider-specific options.

        Returns:
            TranscriptionResult with text, language and duration.
        """

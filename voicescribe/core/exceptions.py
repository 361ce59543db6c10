"""
VoiceScribe exception hierarchy.

All application-specific exceptions inherit from VoiceScribeError,
enabling centralized error handling in the API middleware layer.
Pipeline stage failures share the ``StageError`` base so the orchestrator
and the API can report which stage broke and why.
"""

from datetime import UTC, datetime


class VoiceScribeError(Exception):
    """Base exception for all VoiceScribe errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "VOICESCRIBE_ERROR",
        status_code: int = 500,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class PermissionDeniedError(VoiceScribeError):
    """Raised when the microphone cannot be opened."""

    def __init__(self, detail: str = "Microphone access was denied") -> None:
        super().__init__(detail=detail, code="PERMISSION_DENIED", status_code=403)


class RecorderBusyError(VoiceScribeError):
    """Raised when starting a capture while one is recording or processing."""

    def __init__(self, state: str) -> None:
        super().__init__(
            detail=f"Recorder is busy ({state})",
            code="RECORDER_BUSY",
            status_code=409,
        )


class PipelineStateError(VoiceScribeError):
    """Raised when a pipeline run is advanced out of order."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="PIPELINE_STATE_ERROR", status_code=409)


class EmptyResultError(VoiceScribeError):
    """Raised when an inference response carries no usable text."""

    def __init__(self, detail: str = "Inference response contained no text") -> None:
        super().__init__(detail=detail, code="EMPTY_RESULT", status_code=502)


class StageError(VoiceScribeError):
    """Base for failures of a single pipeline stage.

    Attributes:
        stage: Name of the failing stage ("upload", "transcribe", ...).
        cause: The underlying exception, if any.
    """

    stage = "pipeline"
    error_code = "STAGE_ERROR"
    label = "Stage"

    def __init__(self, detail: str | None = None, cause: BaseException | None = None) -> None:
        self.cause = cause
        if detail is None:
            detail = f"{self.label} failed"
            if cause is not None:
                detail = f"{detail}: {cause}"
        super().__init__(detail=detail, code=self.error_code, status_code=502)


class UploadError(StageError):
    """Raised when the audio cannot be decoded or written to storage."""

    stage = "upload"
    error_code = "UPLOAD_ERROR"
    label = "Audio upload"


class TranscriptionError(StageError):
    """Raised when STT fails or returns no usable text."""

    stage = "transcribe"
    error_code = "TRANSCRIPTION_ERROR"
    label = "Transcription"


class TranslationError(StageError):
    """Raised when the translate stage fails."""

    stage = "translate"
    error_code = "TRANSLATION_ERROR"
    label = "Translation"


class SummaryError(StageError):
    """Raised when summary generation fails."""

    stage = "summarize"
    error_code = "SUMMARY_ERROR"
    label = "Summary generation"

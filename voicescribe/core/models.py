"""
Pydantic v2 models shared by the pipeline, the API layer and the client.

Domain values (Recording, stage results, PipelineRun) are frozen; the
orchestrator advances a run by copying it, never by mutating it.
Request / response models accept and emit camelCase field names.
"""

import uuid
from datetime import datetime
from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SummaryType(StrEnum):
    """Requested verbosity of a summary (the depth class)."""

    short = "short"
    medium = "medium"
    detailed = "detailed"


class PipelineStage(StrEnum):
    """Stage marker of a pipeline run. Only ever moves forward."""

    idle = "idle"
    transcribing = "transcribing"
    translating = "translating"
    summarizing = "summarizing"


class RunStatus(StrEnum):
    """Terminal status of a pipeline run."""

    idle = "idle"
    succeeded = "succeeded"
    failed = "failed"


class RecorderState(StrEnum):
    """States of the client-side recorder."""

    idle = "idle"
    recording = "recording"
    processing = "processing"


# ---------------------------------------------------------------------------
# Domain values
# ---------------------------------------------------------------------------


class Recording(BaseModel):
    """One contiguous audio capture."""

    model_config = ConfigDict(frozen=True)

    data: bytes = Field(repr=False)
    mime_type: str = "audio/wav"
    duration: float = 0.0  # seconds, derived at capture time


class StoredAudioReference(BaseModel):
    """A Recording persisted to blob storage."""

    model_config = ConfigDict(frozen=True)

    url: str
    key: str


class TranscriptionResult(BaseModel):
    """Text recognised from a stored recording."""

    model_config = ConfigDict(frozen=True)

    text: str
    language: str = "unknown"
    duration: float = 0.0
    history_id: int | None = Field(default=None, exclude=True)  # session history row


class TranslationResult(BaseModel):
    """Transcription text rendered in the target language."""

    model_config = ConfigDict(frozen=True)

    translation: str
    target_language: str


class SummaryResult(BaseModel):
    """Summary of a transcription at a given depth."""

    model_config = ConfigDict(frozen=True)

    summary: str
    type: SummaryType
    language: str


class PipelineRun(BaseModel):
    """Bookkeeping for one Recording's trip through the pipeline."""

    model_config = ConfigDict(frozen=True)

    run_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    recording: Recording | None = Field(default=None, exclude=True)
    audio: StoredAudioReference | None = None
    transcription: TranscriptionResult | None = None
    translation: TranslationResult | None = None
    summary: SummaryResult | None = None
    stage: PipelineStage = PipelineStage.idle
    status: RunStatus = RunStatus.idle
    error: str | None = None
    failed_stage: str | None = None


# ---------------------------------------------------------------------------
# Inference payloads (tagged union)
# ---------------------------------------------------------------------------


class ContentFragment(BaseModel):
    """One typed unit of a structured inference response."""

    type: str = "text"
    text: str | None = None


class PlainText(BaseModel):
    """Inference response carried as a single string."""

    kind: Literal["plain"] = "plain"
    text: str


class FragmentSequence(BaseModel):
    """Inference response carried as an ordered list of fragments."""

    kind: Literal["fragments"] = "fragments"
    fragments: list[ContentFragment] = Field(default_factory=list)


LLMContent = Annotated[PlainText | FragmentSequence, Field(discriminator="kind")]


# ---------------------------------------------------------------------------
# API request / response bodies
# ---------------------------------------------------------------------------


class APIModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(APIModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


class UploadAudioRequest(APIModel):
    """POST /storage/upload-audio body."""

    audio_data: str  # base64
    mime_type: str = "audio/webm"


class UploadAudioResponse(APIModel):
    url: str
    key: str


class TranscribeRequest(APIModel):
    """POST /transcribe/audio body."""

    audio_url: str
    language: str | None = None


class TranscribeResponse(APIModel):
    text: str
    language: str
    duration: float


class TranslateRequest(APIModel):
    """POST /translate/text body."""

    text: str
    target_language: str
    context: str | None = None


class TranslateResponse(APIModel):
    translation: str
    target_language: str


class SummaryRequest(APIModel):
    """POST /summary/generate body."""

    text: str
    type: SummaryType = SummaryType.medium
    language: str = "en"


class SummaryResponse(APIModel):
    summary: str
    type: SummaryType
    language: str


class PipelineRunRequest(APIModel):
    """POST /pipeline/run body: one recording, all four stages."""

    audio_data: str  # base64
    mime_type: str = "audio/webm"
    target_language: str = "ja"
    summary_type: SummaryType = SummaryType.medium
    summary_language: str | None = None  # Defaults to target_language


class PipelineRunResponse(APIModel):
    """Snapshot of a finished (or failed) pipeline run."""

    run_id: str
    stage: PipelineStage
    status: RunStatus
    audio: UploadAudioResponse | None = None
    transcription: TranscribeResponse | None = None
    translation: TranslateResponse | None = None
    summary: SummaryResponse | None = None
    error: str | None = None
    failed_stage: str | None = None


class TranscriptionHistoryItem(APIModel):
    """One row of the session history."""

    id: int
    session_id: str
    text: str
    language: str
    duration: int | None = None
    created_at: datetime


class TranslationHistoryItem(APIModel):
    id: int
    target_language: str
    translated_text: str
    created_at: datetime


class SummaryHistoryItem(APIModel):
    id: int
    summary_type: str
    summary_language: str
    summary_text: str
    created_at: datetime


class TranscriptionDetail(TranscriptionHistoryItem):
    """One stored transcription with the translations and summaries made from it."""

    translations: list[TranslationHistoryItem] = Field(default_factory=list)
    summaries: list[SummaryHistoryItem] = Field(default_factory=list)

"""
One-shot pipeline endpoint.

Runs upload, transcribe, translate and summarize for one recording inside
the request. A stage failure is reported in the returned snapshot
(``status="failed"``, ``failedStage``, ``error``) together with whatever
results were produced before it.
"""

import logging

from fastapi import APIRouter, Depends

from voicescribe.api.dependencies import get_backend
from voicescribe.core.exceptions import StageError
from voicescribe.core.models import (
    PipelineRun,
    PipelineRunRequest,
    PipelineRunResponse,
    Recording,
    SummaryResponse,
    TranscribeResponse,
    TranslateResponse,
    UploadAudioResponse,
)
from voicescribe.services.orchestrator import PipelineOrchestrator
from voicescribe.services.pipeline.backend import StageBackend
from voicescribe.services.pipeline.upload import decode_audio
from voicescribe.services.storage.history import record_run

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pipeline", tags=["pipeline"])


def _to_response(run: PipelineRun) -> PipelineRunResponse:
    """Convert a PipelineRun snapshot to its wire model."""
    return PipelineRunResponse(
        run_id=run.run_id,
        stage=run.stage,
        status=run.status,
        audio=UploadAudioResponse(url=run.audio.url, key=run.audio.key) if run.audio else None,
        transcription=(
            TranscribeResponse(
                text=run.transcription.text,
                language=run.transcription.language,
                duration=run.transcription.duration,
            )
            if run.transcription
            else None
        ),
        translation=(
            TranslateResponse(
                translation=run.translation.translation,
                target_language=run.translation.target_language,
            )
            if run.translation
            else None
        ),
        summary=(
            SummaryResponse(
                summary=run.summary.summary,
                type=run.summary.type,
                language=run.summary.language,
            )
            if run.summary
            else None
        ),
        error=run.error,
        failed_stage=run.failed_stage,
    )


@router.post("/run", response_model=PipelineRunResponse)
async def run_pipeline(body: PipelineRunRequest, backend: StageBackend = Depends(get_backend)):
    """Run all four stages and return the final snapshot."""
    recording = Recording(data=decode_audio(body.audio_data), mime_type=body.mime_type)
    snapshots: list[PipelineRun] = []

    async def keep(run: PipelineRun) -> None:
        snapshots.append(run)

    orchestrator = PipelineOrchestrator(
        backend,
        target_language=body.target_language,
        summary_type=body.summary_type,
        summary_language=body.summary_language,
        on_update=keep,
    )
    try:
        run = await orchestrator.run(recording)
    except StageError:
        run = snapshots[-1]
    await record_run(run)
    return _to_response(run)

"""One-way session history writes.

The pipeline never reads these rows back. Writes get a few quick retries
because SQLite reports concurrent writers as ``OperationalError`` ("database
is locked"); inference calls are never retried.

The transcribe stage stores the transcription and tags the result with its
row ID. Once a run settles, :func:`record_run` stores the run's translation
and summary against that row.
"""

import logging
import time

from sqlalchemy.exc import OperationalError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from voicescribe.core.models import PipelineRun, TranscriptionResult
from voicescribe.services.storage.database import get_session
from voicescribe.services.storage.repository import HistoryRepository

logger = logging.getLogger(__name__)

_history_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)


def new_session_id() -> str:
    """Return a history key of the form ``session-<epoch ms>``."""
    return f"session-{int(time.time() * 1000)}"


@_history_retry
async def save_transcription(result: TranscriptionResult, session_id: str | None = None) -> int:
    """Persist a copy of a transcription and return its row ID."""
    async with get_session() as session:
        repo = HistoryRepository(session)
        row = await repo.create_transcription(
            session_id=session_id or new_session_id(),
            text=result.text,
            language=result.language,
            duration=round(result.duration),
        )
        return row.id


@_history_retry
async def save_run_results(run: PipelineRun) -> None:
    """Persist the translation and summary of ``run`` against its transcription row."""
    transcription_id = run.transcription.history_id
    async with get_session() as session:
        repo = HistoryRepository(session)
        if run.translation is not None:
            await repo.create_translation(
                transcription_id=transcription_id,
                source_text=run.transcription.text,
                translated_text=run.translation.translation,
                target_language=run.translation.target_language,
            )
        if run.summary is not None:
            await repo.create_summary(
                transcription_id=transcription_id,
                summary_text=run.summary.summary,
                summary_type=str(run.summary.type),
                summary_language=run.summary.language,
            )


async def record_transcription(result: TranscriptionResult) -> int | None:
    """Best-effort wrapper: history failures are logged, never raised."""
    try:
        row_id = await save_transcription(result)
    except Exception:
        logger.exception("Failed to store transcription in session history (non-fatal)")
        return None
    logger.debug("Stored transcription %s in session history", row_id)
    return row_id


async def record_run(run: PipelineRun) -> None:
    """Best-effort: store a settled run's derived texts.

    Runs whose transcription was never stored (history disabled, remote
    backend, failed before transcription) are skipped.
    """
    if run.transcription is None or run.transcription.history_id is None:
        return
    if run.translation is None and run.summary is None:
        return
    try:
        await save_run_results(run)
    except Exception:
        logger.exception("Failed to store run %s in session history (non-fatal)", run.run_id)
        return
    logger.debug(
        "Stored results of run %s under transcription %s",
        run.run_id,
        run.transcription.history_id,
    )

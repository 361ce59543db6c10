"""
Session history endpoints (read-only views of stored transcriptions).
"""

from fastapi import APIRouter, Query

from voicescribe.core.models import (
    SummaryHistoryItem,
    TranscriptionDetail,
    TranscriptionHistoryItem,
    TranslationHistoryItem,
)
from voicescribe.services.storage.database import get_session
from voicescribe.services.storage.repository import HistoryRepository

router = APIRouter(prefix="/transcriptions", tags=["history"])


@router.get("", response_model=list[TranscriptionHistoryItem])
async def list_transcriptions(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """List stored transcriptions, newest first."""
    async with get_session() as session:
        repo = HistoryRepository(session)
        rows = await repo.list_transcriptions(limit=limit, offset=offset)
    return [
        TranscriptionHistoryItem(
            id=row.id,
            session_id=row.session_id,
            text=row.text,
            language=row.language,
            duration=row.duration,
            created_at=row.created_at,
        )
        for row in rows
    ]


@router.get("/{transcription_id}", response_model=TranscriptionDetail)
async def get_transcription(transcription_id: int):
    """Return one transcription with its translations and summaries."""
    async with get_session() as session:
        repo = HistoryRepository(session)
        row = await repo.get_transcription(transcription_id)
        return TranscriptionDetail(
            id=row.id,
            session_id=row.session_id,
            text=row.text,
            language=row.language,
            duration=row.duration,
            created_at=row.created_at,
            translations=[
                TranslationHistoryItem(
                    id=t.id,
                    target_language=t.target_language,
                    translated_text=t.translated_text,
                    created_at=t.created_at,
                )
                for t in row.translations
            ],
            summaries=[
                SummaryHistoryItem(
                    id=s.id,
                    summary_type=s.summary_type,
                    summary_language=s.summary_language,
                    summary_text=s.summary_text,
                    created_at=s.created_at,
                )
                for s in row.summaries
            ],
        )

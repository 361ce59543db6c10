"""
CRUD repository for the session history tables.

``HistoryRepository`` receives an ``AsyncSession`` and provides all
data-access methods. It calls ``flush()`` rather than ``commit()`` so
that transaction boundaries are controlled by the caller (typically
:func:`get_session`).
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from voicescribe.core.exceptions import VoiceScribeError
from voicescribe.services.storage.models_db import Summary, Transcription, Translation


class HistoryRepository:
    """Data-access layer for transcriptions and their derived texts.

    Args:
        session: An active SQLAlchemy ``AsyncSession``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create_transcription(
        self,
        session_id: str,
        text: str,
        language: str,
        duration: int | None = None,
    ) -> Transcription:
        row = Transcription(
            session_id=session_id,
            text=text,
            language=language,
            duration=duration,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def get_transcription(self, transcription_id: int) -> Transcription:
        """Return a transcription by ID or raise a 404 ``VoiceScribeError``."""
        row = await self._session.get(Transcription, transcription_id)
        if row is None:
            raise VoiceScribeError(
                detail=f"Transcription not found: {transcription_id}",
                code="TRANSCRIPTION_NOT_FOUND",
                status_code=404,
            )
        return row

    async def list_transcriptions(self, limit: int = 50, offset: int = 0) -> list[Transcription]:
        """Return transcriptions, newest first."""
        stmt = (
            select(Transcription)
            .order_by(Transcription.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def create_translation(
        self,
        transcription_id: int,
        source_text: str,
        translated_text: str,
        target_language: str,
    ) -> Translation:
        row = Translation(
            transcription_id=transcription_id,
            source_text=source_text,
            translated_text=translated_text,
            target_language=target_language,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def create_summary(
        self,
        transcription_id: int,
        summary_text: str,
        summary_type: str,
        summary_language: str,
    ) -> Summary:
        row = Summary(
            transcription_id=transcription_id,
            summary_text=summary_text,
            summary_type=summary_type,
            summary_language=summary_language,
        )
        self._session.add(row)
        await self._session.flush()
        return row

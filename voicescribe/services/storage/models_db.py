"""
SQLAlchemy ORM models for the session history.

Tables: ``transcriptions``, ``translations``, ``summaries``.
"""

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voicescribe.services.storage.database import Base


class Transcription(Base):
    """A transcription produced by one pipeline run."""

    __tablename__ = "transcriptions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(String(64), index=True)
    text: Mapped[str] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(32), default="en")
    duration: Mapped[int | None] = mapped_column(nullable=True)  # seconds
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    translations: Mapped[list["Translation"]] = relationship(
        back_populates="transcription",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    summaries: Mapped[list["Summary"]] = relationship(
        back_populates="transcription",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<Transcription id={self.id} session={self.session_id!r}>"


class Translation(Base):
    """A translation of a stored transcription."""

    __tablename__ = "translations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    transcription_id: Mapped[int] = mapped_column(ForeignKey("transcriptions.id"), index=True)
    source_text: Mapped[str] = mapped_column(Text)
    translated_text: Mapped[str] = mapped_column(Text)
    target_language: Mapped[str] = mapped_column(String(10))
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    transcription: Mapped["Transcription"] = relationship(back_populates="translations")


class Summary(Base):
    """A summary of a stored transcription."""

    __tablename__ = "summaries"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    transcription_id: Mapped[int] = mapped_column(ForeignKey("transcriptions.id"), index=True)
    summary_text: Mapped[str] = mapped_column(Text)
    summary_type: Mapped[str] = mapped_column(String(20))  # short, medium, detailed
    summary_language: Mapped[str] = mapped_column(String(10), default="en")
    created_at: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))

    transcription: Mapped["Transcription"] = relationship(back_populates="summaries")

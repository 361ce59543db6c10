"""Shared pytest fixtures for the VoiceScribe test suite.

Provides mock LLM/STT providers, PCM audio samples and an in-memory
database used across unit and integration tests.
"""

import struct
from unittest.mock import AsyncMock

import pytest

from voicescribe.core.models import PlainText, TranscriptionResult
from voicescribe.services.storage.blob import LocalBlobStorage

# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm():
    """Create a mock LLM provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface whose ``chat``
        answers with a plain-text payload.
    """
    from voicescribe.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.chat.return_value = PlainText(text="Test response")
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default transcription result.
    """
    from voicescribe.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = TranscriptionResult(
        text="This is a test transcription.",
        language="en",
        duration=1.0,
    )
    return stt


# ---------------------------------------------------------------------------
# Storage Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def blob_storage(tmp_path):
    """Filesystem blob storage rooted in a temp dir, served at http://test."""
    return LocalBlobStorage(root=tmp_path / "media", public_base_url="http://test")


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_pcm_bytes():
    """Generate 1 second of 440Hz sine-wave PCM audio (16kHz, 16-bit, mono).

    Returns:
        bytes: Raw PCM audio data.
    """
    import math

    sample_rate = 16000
    duration = 1.0
    frequency = 440.0
    amplitude = 16000  # ~50% of max int16

    samples = []
    for i in range(int(sample_rate * duration)):
        value = int(amplitude * math.sin(2 * math.pi * frequency * i / sample_rate))
        samples.append(struct.pack("<h", value))
    return b"".join(samples)


@pytest.fixture
def silent_pcm_bytes():
    """Generate 1 second of silence as PCM audio (16kHz, 16-bit, mono)."""
    sample_rate = 16000
    return b"\x00\x00" * sample_rate


# ---------------------------------------------------------------------------
# Database Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from voicescribe.services.storage.database import Base, init_db

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)
    assert "transcriptions" in Base.metadata.tables
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Yield an AsyncSession bound to the test engine; rolls back after test."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def history_db(db_engine):
    """Point the module-level session factory at the in-memory engine."""
    from voicescribe.services.storage import database

    database._engine = db_engine
    database._session_factory = None
    yield db_engine
    database.reset_engine()

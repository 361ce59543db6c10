"""Integration test fixtures for VoiceScribe.

Provides an async HTTP client against a fresh app whose stage backend runs
the real stage executors with mocked LLM / STT providers, filesystem blob
storage in a temp dir and an in-memory SQLite history.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from voicescribe.api.app import create_app
from voicescribe.api.dependencies import get_backend, get_blob_storage
from voicescribe.client.api_client import APIClient
from voicescribe.services.pipeline.backend import LocalStageBackend
from voicescribe.services.pipeline.summarize import SummarizeStage
from voicescribe.services.pipeline.transcribe import TranscribeStage
from voicescribe.services.pipeline.translate import TranslateStage
from voicescribe.services.pipeline.upload import UploadStage


@pytest.fixture
def backend(mock_llm, mock_stt, blob_storage):
    """In-process stage backend wired to mocks and temp storage."""
    return LocalStageBackend(
        upload=UploadStage(blob_storage),
        transcribe=TranscribeStage(mock_stt, storage=blob_storage),
        translate=TranslateStage(mock_llm),
        summarize=SummarizeStage(mock_llm),
    )


@pytest.fixture
def app(backend, blob_storage):
    """Create a fresh FastAPI application with the test backend injected."""
    app = create_app()
    app.dependency_overrides[get_backend] = lambda: backend
    app.dependency_overrides[get_blob_storage] = lambda: blob_storage
    return app


@pytest.fixture
async def async_client(app, history_db):
    """AsyncClient backed by the in-memory test engine."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def api_client(app, history_db):
    """The project's own APIClient talking to the app in-process."""
    async with APIClient(base_url="http://test", transport=ASGITransport(app=app)) as client:
        yield client

"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The module-level ``app`` instance
allows ``uvicorn voicescribe.api.app:app --reload``.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voicescribe import __version__
from voicescribe.api.middleware.error_handler import register_error_handlers
from voicescribe.api.routes import history, media, pipeline, storage, summary, transcribe, translate
from voicescribe.core.config import get_settings
from voicescribe.core.models import HealthResponse
from voicescribe.services.storage.database import close_db, init_db


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the history tables on startup and dispose the engine on shutdown."""
    if get_settings().history_enabled:
        await init_db()
    yield
    await close_db()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application.

    Returns:
        FastAPI: The configured application, ready for ``uvicorn``.
    """

    app = FastAPI(
        title="VoiceScribe",
        description="Voice capture with transcription, translation and summarization.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- CORS --
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    # -- Stage procedures --
    app.include_router(storage.router, prefix="/api/v1")
    app.include_router(transcribe.router, prefix="/api/v1")
    app.include_router(translate.router, prefix="/api/v1")
    app.include_router(summary.router, prefix="/api/v1")

    # -- Full pipeline and history --
    app.include_router(pipeline.router, prefix="/api/v1")
    app.include_router(history.router, prefix="/api/v1")

    # -- Uploaded audio --
    app.include_router(media.router)

    return app


app = create_app()

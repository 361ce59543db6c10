"""
Summary REST endpoint.

Generates a short, medium or detailed summary. Any acknowledgment preamble
the model writes before a ``---`` separator is removed.
"""

from fastapi import APIRouter, Depends

from voicescribe.api.dependencies import get_backend
from voicescribe.core.models import SummaryRequest, SummaryResponse
from voicescribe.services.pipeline.backend import StageBackend

router = APIRouter(prefix="/summary", tags=["summaries"])


@router.post("/generate", response_model=SummaryResponse)
async def generate_summary(body: SummaryRequest, backend: StageBackend = Depends(get_backend)):
    """Summarize ``text`` at the requested depth, in ``language``."""
    result = await backend.generate_summary(body.text, body.type, body.language)
    return SummaryResponse(summary=result.summary, type=result.type, language=result.language)

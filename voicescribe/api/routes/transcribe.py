"""
Transcription REST endpoint.
"""

from fastapi import APIRouter, Depends

from voicescribe.api.dependencies import get_backend
from voicescribe.core.models import TranscribeRequest, TranscribeResponse
from voicescribe.services.pipeline.backend import StageBackend

router = APIRouter(prefix="/transcribe", tags=["transcription"])


@router.post("/audio", response_model=TranscribeResponse)
async def transcribe_audio(body: TranscribeRequest, backend: StageBackend = Depends(get_backend)):
    """Transcribe the audio behind ``audioUrl`` (our media URL, http(s) or data URL)."""
    result = await backend.transcribe_audio(body.audio_url, body.language)
    return TranscribeResponse(text=result.text, language=result.language, duration=result.duration)

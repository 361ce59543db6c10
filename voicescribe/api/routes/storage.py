"""
Storage REST endpoint: accept base64 audio and persist it as a blob.
"""

from fastapi import APIRouter, Depends

from voicescribe.api.dependencies import get_backend
from voicescribe.core.models import UploadAudioRequest, UploadAudioResponse
from voicescribe.services.pipeline.backend import StageBackend
from voicescribe.services.pipeline.upload import decode_audio

router = APIRouter(prefix="/storage", tags=["storage"])


@router.post("/upload-audio", response_model=UploadAudioResponse)
async def upload_audio(body: UploadAudioRequest, backend: StageBackend = Depends(get_backend)):
    """Store recording bytes unmodified and return their public URL and key."""
    ref = await backend.upload_audio(decode_audio(body.audio_data), body.mime_type)
    return UploadAudioResponse(url=ref.url, key=ref.key)

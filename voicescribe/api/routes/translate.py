"""
Translation REST endpoint.
"""

from fastapi import APIRouter, Depends

from voicescribe.api.dependencies import get_backend
from voicescribe.core.models import TranslateRequest, TranslateResponse
from voicescribe.services.pipeline.backend import StageBackend

router = APIRouter(prefix="/translate", tags=["translation"])


@router.post("/text", response_model=TranslateResponse)
async def translate_text(body: TranslateRequest, backend: StageBackend = Depends(get_backend)):
    result = await backend.translate_text(body.text, body.target_language, body.context)
    return TranslateResponse(
        translation=result.translation, target_language=result.target_language
    )

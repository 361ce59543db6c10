"""
Serves uploaded audio back by storage key, so stored URLs resolve.
"""

import mimetypes

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from voicescribe.api.dependencies import get_blob_storage
from voicescribe.core.exceptions import VoiceScribeError
from voicescribe.services.storage.blob import LocalBlobStorage

router = APIRouter(prefix="/media", tags=["media"])


@router.get("/{key:path}")
async def get_media(key: str, storage: LocalBlobStorage = Depends(get_blob_storage)):
    """Return the stored bytes for ``key``."""
    try:
        path = storage.path_for(key)
    except ValueError:
        path = None
    if path is None or not path.is_file():
        raise VoiceScribeError(
            detail=f"Media not found: {key}",
            code="MEDIA_NOT_FOUND",
            status_code=404,
        )
    media_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return FileResponse(path=path, media_type=media_type)

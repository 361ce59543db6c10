"""Upload stage: persist a recording and return a resolvable locator."""

import base64
import binascii
import logging
import mimetypes
import secrets
from datetime import UTC, datetime

from voicescribe.core.exceptions import UploadError
from voicescribe.core.models import StoredAudioReference
from voicescribe.services.pipeline.base import BaseStage
from voicescribe.services.storage.blob import BlobStorage

logger = logging.getLogger(__name__)

_AUDIO_EXTENSIONS = {
    "audio/webm": ".webm",
    "audio/wav": ".wav",
    "audio/wave": ".wav",
    "audio/x-wav": ".wav",
    "audio/ogg": ".ogg",
    "audio/mpeg": ".mp3",
    "audio/mp4": ".m4a",
    "audio/x-m4a": ".m4a",
    "audio/flac": ".flac",
}


def extension_for(mime_type: str) -> str:
    """Return a file extension for ``mime_type`` (parameters ignored)."""
    base = mime_type.split(";", 1)[0].strip().lower()
    return _AUDIO_EXTENSIONS.get(base) or mimetypes.guess_extension(base) or ".bin"


def generate_storage_key(mime_type: str, now: datetime | None = None) -> str:
    """Build a collision-resistant key: timestamp to the millisecond plus random hex."""
    now = now or datetime.now(UTC)
    stamp = f"{now:%Y%m%d%H%M%S}-{now.microsecond // 1000:03d}"
    return f"audio/{stamp}-{secrets.token_hex(4)}{extension_for(mime_type)}"


def decode_audio(audio_data: str) -> bytes:
    """Decode base64 audio, accepting a ``data:`` URL prefix.

    Raises:
        UploadError: If the payload is not valid base64 or is empty.
    """
    payload = audio_data.split(",", 1)[1] if audio_data.startswith("data:") else audio_data
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise UploadError("Audio data is not valid base64", cause=exc) from exc
    if not data:
        raise UploadError("Audio data is empty")
    return data


class UploadStage(BaseStage):
    """Writes recording bytes to blob storage, unmodified."""

    error_cls = UploadError

    def __init__(self, storage: BlobStorage) -> None:
        self._storage = storage

    async def run(self, data: bytes, mime_type: str = "audio/webm") -> StoredAudioReference:
        if not data:
            raise UploadError("Audio data is empty")
        key = generate_storage_key(mime_type)
        try:
            return await self._storage.put(key, data, mime_type)
        except Exception as exc:
            raise self.wrap(exc) from exc


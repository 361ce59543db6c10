"""Transcribe stage: resolve an audio locator and run speech-to-text.

Accepted locators:

* URLs served by this instance's blob storage (read directly, no HTTP hop),
* ``http://`` / ``https://`` URLs (fetched with httpx),
* ``data:`` URLs carrying base64 audio.
"""

import base64
import binascii
import logging
from pathlib import PurePosixPath
from urllib.parse import urlparse

import httpx

from voicescribe.core.exceptions import StageError, TranscriptionError
from voicescribe.core.models import TranscriptionResult
from voicescribe.services.pipeline.base import BaseStage
from voicescribe.services.pipeline.upload import extension_for
from voicescribe.services.storage.blob import LocalBlobStorage
from voicescribe.services.storage.history import record_transcription
from voicescribe.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


def parse_data_url(url: str) -> tuple[bytes, str]:
    """Decode a base64 ``data:`` URL into ``(bytes, mime_type)``.

    Raises:
        ValueError: If the URL is malformed or not base64-encoded.
    """
    header, sep, payload = url.partition(",")
    if not sep or not header.startswith("data:"):
        raise ValueError("Malformed data URL")
    params = header[len("data:") :].split(";")
    if "base64" not in params[1:]:
        raise ValueError("Only base64 data URLs are supported")
    mime_type = params[0] or "application/octet-stream"
    try:
        return base64.b64decode(payload, validate=True), mime_type
    except binascii.Error as exc:
        raise ValueError(f"Invalid base64 in data URL: {exc}") from exc


class TranscribeStage(BaseStage):
    """Turns a stored recording into text.

    Args:
        stt: Speech-to-text provider.
        storage: Local blob storage, for reading our own ``/media`` URLs directly.
        http_client: Optional shared ``httpx.AsyncClient`` for remote locators.
        keep_history: Store a copy of each result in the session history.
    """

    error_cls = TranscriptionError

    def __init__(
        self,
        stt: BaseSTT,
        storage: LocalBlobStorage | None = None,
        http_client: httpx.AsyncClient | None = None,
        keep_history: bool = True,
    ) -> None:
        self._stt = stt
        self._storage = storage
        self._http = http_client
        self._keep_history = keep_history

    async def _fetch(self, url: str) -> bytes:
        if self._http is not None:
            resp = await self._http.get(url)
            resp.raise_for_status()
            return resp.content
        async with httpx.AsyncClient(timeout=60.0, follow_redirects=True) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.content

    async def load_audio(self, audio_url: str) -> tuple[bytes, str]:
        """Return ``(audio bytes, filename)`` for a locator."""
        if audio_url.startswith("data:"):
            data, mime_type = parse_data_url(audio_url)
            return data, f"audio{extension_for(mime_type)}"

        filename = PurePosixPath(urlparse(audio_url).path).name or "audio.webm"
        key = self._storage.key_from_url(audio_url) if self._storage else None
        if key is not None:
            return await self._storage.get(key), filename

        scheme = urlparse(audio_url).scheme
        if scheme not in ("http", "https"):
            raise ValueError(f"Unsupported audio URL scheme: {scheme or audio_url!r}")
        return await self._fetch(audio_url), filename

    async def run(self, audio_url: str, language: str | None = None) -> TranscriptionResult:
        try:
            audio, filename = await self.load_audio(audio_url)
            result = await self._stt.transcribe(audio, filename=filename, language=language)
        except StageError:
            raise
        except Exception as exc:
            raise self.wrap(exc) from exc

        if not result.text.strip():
            raise TranscriptionError("Transcription returned no text")

        logger.info(
            "Transcribed %s: %d chars, language=%s, %.1fs",
            filename,
            len(result.text),
            result.language,
            result.duration,
        )
        if self._keep_history:
            row_id = await record_transcription(result)
            if row_id is not None:
                result = result.model_copy(update={"history_id": row_id})
        return result

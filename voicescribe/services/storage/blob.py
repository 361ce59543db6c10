"""Blob storage for uploaded recordings.

``LocalBlobStorage`` writes objects under ``media_dir`` and hands out URLs
served by the API's ``/media/{key}`` route. Bytes are stored exactly as
received.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from voicescribe.core.config import get_settings
from voicescribe.core.models import StoredAudioReference

logger = logging.getLogger(__name__)


class BlobStorage(ABC):
    """Interface for a put/get object store."""

    @abstractmethod
    async def put(self, key: str, data: bytes, mime_type: str) -> StoredAudioReference:
        """Persist ``data`` under ``key`` and return its public locator."""

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Return the bytes stored under ``key``.

        Raises:
            FileNotFoundError: If nothing is stored under ``key``.
        """


class LocalBlobStorage(BlobStorage):
    """Filesystem-backed blob storage.

    Args:
        root: Directory objects are written under (defaults to ``media_dir``).
        public_base_url: URL prefix the API is reachable at.
    """

    def __init__(self, root: str | Path | None = None, public_base_url: str | None = None) -> None:
        settings = get_settings()
        self._root = Path(root or settings.media_dir).resolve()
        self._base_url = (public_base_url or settings.public_base_url).rstrip("/")

    def path_for(self, key: str) -> Path:
        """Resolve ``key`` inside the storage root.

        Raises:
            ValueError: If the key escapes the storage root.
        """
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root):
            raise ValueError(f"Storage key outside media directory: {key}")
        return path

    def url_for(self, key: str) -> str:
        return f"{self._base_url}/media/{key}"

    def key_from_url(self, url: str) -> str | None:
        """Return the storage key if ``url`` points into this store."""
        prefix = f"{self._base_url}/media/"
        if url.startswith(prefix):
            return url[len(prefix) :]
        return None

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def put(self, key: str, data: bytes, mime_type: str) -> StoredAudioReference:
        path = self.path_for(key)
        await asyncio.to_thread(self._write, path, data)
        logger.info("Stored %s (%d bytes, %s)", key, len(data), mime_type)
        return StoredAudioReference(url=self.url_for(key), key=key)

    async def get(self, key: str) -> bytes:
        path = self.path_for(key)
        if not path.is_file():
            raise FileNotFoundError(key)
        return await asyncio.to_thread(path.read_bytes)

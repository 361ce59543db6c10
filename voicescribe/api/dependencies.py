"""
FastAPI dependencies.

Route handlers receive the stage backend through ``Depends(get_backend)`` so
tests can swap it with ``app.dependency_overrides``.
"""

from functools import lru_cache

from voicescribe.services.pipeline.backend import LocalStageBackend
from voicescribe.services.storage.blob import LocalBlobStorage


@lru_cache
def get_backend() -> LocalStageBackend:
    """Return the process-wide in-process stage backend."""
    return LocalStageBackend.from_settings()


@lru_cache
def get_blob_storage() -> LocalBlobStorage:
    """Return the blob store that backs ``/media/{key}``."""
    return LocalBlobStorage()

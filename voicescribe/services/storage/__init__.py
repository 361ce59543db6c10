"""
Storage module - blob storage and session history.
"""

from voicescribe.services.storage.blob import BlobStorage, LocalBlobStorage
from voicescribe.services.storage.database import (
    Base,
    close_db,
    get_engine,
    get_session,
    init_db,
    reset_engine,
)
from voicescribe.services.storage.models_db import Summary, Transcription, Translation
from voicescribe.services.storage.repository import HistoryRepository

__all__ = [
    "Base",
    "BlobStorage",
    "HistoryRepository",
    "LocalBlobStorage",
    "Summary",
    "Transcription",
    "Translation",
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    "reset_engine",
]

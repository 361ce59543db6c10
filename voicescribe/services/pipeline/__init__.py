"""
Pipeline module - stage executors, instruction builders and normalization.
"""

from .backend import LocalStageBackend, StageBackend
from .base import BaseStage
from .normalizer import PreambleStripper, normalize_content, strip_preamble
from .prompts import language_name
from .summarize import SummarizeStage
from .transcribe import TranscribeStage
from .translate import TranslateStage
from .upload import UploadStage

__all__ = [
    "BaseStage",
    "LocalStageBackend",
    "PreambleStripper",
    "StageBackend",
    "SummarizeStage",
    "TranscribeStage",
    "TranslateStage",
    "UploadStage",
    "language_name",
    "normalize_content",
    "strip_preamble",
]

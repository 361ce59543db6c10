"""
Abstract base class for pipeline stage executors.

A stage is a stateless request/response operation. Every failure leaves
``run()`` as an instance of the stage's ``StageError`` subclass, with the
original exception kept as ``cause``.
"""

import logging
from abc import ABC, abstractmethod

from voicescribe.core.exceptions import StageError

logger = logging.getLogger(__name__)


class BaseStage(ABC):
    """Interface that every stage executor implements."""

    error_cls: type[StageError] = StageError

    @property
    def name(self) -> str:
        return self.error_cls.stage

    @abstractmethod
    async def run(self, *args, **kwargs):
        """Execute the stage and return its typed result."""

    def wrap(self, exc: Exception) -> StageError:
        """Return ``exc`` as this stage's error, logging the failure once."""
        logger.error("%s stage failed: %s", self.name, exc)
        return self.error_cls(cause=exc)

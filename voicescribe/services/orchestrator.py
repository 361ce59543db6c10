"""Pipeline orchestration for one recording.

``PipelineSequencer`` is the finite-state part: one transition per completed
stage, each returning a new ``PipelineRun``. ``PipelineOrchestrator`` drives
the stages through a ``StageBackend`` strictly in sequence:

    upload -> transcribe -> translate -> summarize

The first failure stops the run. No stage is retried.

Usage::

    orchestrator = PipelineOrchestrator(LocalStageBackend.from_settings(), target_language="ja")
    run = await orchestrator.run(recording)
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from voicescribe.core.config import get_settings
from voicescribe.core.exceptions import (
    PipelineStateError,
    StageError,
    SummaryError,
    TranscriptionError,
    TranslationError,
    UploadError,
)
from voicescribe.core.models import (
    PipelineRun,
    PipelineStage,
    Recording,
    RunStatus,
    StoredAudioReference,
    SummaryResult,
    SummaryType,
    TranscriptionResult,
    TranslationResult,
)
from voicescribe.services.pipeline.backend import StageBackend

logger = logging.getLogger(__name__)

RunListener = Callable[[PipelineRun], Awaitable[None]]


class PipelineSequencer:
    """Pure transitions of a ``PipelineRun``.

    The stage marker moves ``idle -> transcribing -> translating ->
    summarizing -> idle``; ``fail`` drops it back to ``idle`` from anywhere.
    Each method raises :class:`PipelineStateError` when called out of order.
    """

    @staticmethod
    def _expect(run: PipelineRun, stage: PipelineStage, action: str) -> None:
        if run.stage != stage:
            raise PipelineStateError(f"Cannot {action} while stage is {run.stage}")

    def begin(self, run: PipelineRun) -> PipelineRun:
        self._expect(run, PipelineStage.idle, "begin")
        if run.status != RunStatus.idle:
            raise PipelineStateError(f"Run {run.run_id} already finished ({run.status})")
        return run.model_copy(update={"stage": PipelineStage.transcribing})

    def uploaded(self, run: PipelineRun, audio: StoredAudioReference) -> PipelineRun:
        self._expect(run, PipelineStage.transcribing, "record upload")
        return run.model_copy(update={"audio": audio})

    def transcribed(self, run: PipelineRun, result: TranscriptionResult) -> PipelineRun:
        self._expect(run, PipelineStage.transcribing, "record transcription")
        if run.audio is None:
            raise PipelineStateError("Cannot record transcription before upload")
        return run.model_copy(
            update={"transcription": result, "stage": PipelineStage.translating}
        )

    def translated(self, run: PipelineRun, result: TranslationResult) -> PipelineRun:
        self._expect(run, PipelineStage.translating, "record translation")
        return run.model_copy(update={"translation": result, "stage": PipelineStage.summarizing})

    def summarized(self, run: PipelineRun, result: SummaryResult) -> PipelineRun:
        self._expect(run, PipelineStage.summarizing, "record summary")
        return run.model_copy(
            update={
                "summary": result,
                "stage": PipelineStage.idle,
                "status": RunStatus.succeeded,
            }
        )

    def fail(self, run: PipelineRun, error: StageError) -> PipelineRun:
        """Settle a run as failed. Results already produced stay on the run."""
        return run.model_copy(
            update={
                "stage": PipelineStage.idle,
                "status": RunStatus.failed,
                "error": error.detail,
                "failed_stage": error.stage,
            }
        )


class PipelineOrchestrator:
    """Runs the four stages for one recording at a time per call.

    Holds configuration only; every ``run()`` owns its own ``PipelineRun``, so
    one orchestrator can serve concurrent recordings.

    Args:
        backend: Where the stages execute (in-process or over HTTP).
        target_language: Translation target.
        summary_type: Summary depth.
        summary_language: Language of the summary (defaults to ``target_language``).
        source_language: Language hint sent with the transcription request.
        stage_timeout: Deadline in seconds for each stage (``None`` = unbounded).
        on_update: Async callback receiving every new ``PipelineRun`` snapshot.
    """

    def __init__(
        self,
        backend: StageBackend,
        target_language: str | None = None,
        summary_type: SummaryType | str | None = None,
        summary_language: str | None = None,
        source_language: str | None = None,
        stage_timeout: float | None = None,
        on_update: RunListener | None = None,
    ) -> None:
        settings = get_settings()
        self._backend = backend
        self.target_language = target_language or settings.default_target_language
        self.summary_type = SummaryType(summary_type or settings.default_summary_type)
        self.summary_language = summary_language or self.target_language
        self.source_language = source_language or settings.source_language
        self.stage_timeout = (
            stage_timeout if stage_timeout is not None else settings.stage_timeout_seconds
        )
        self._on_update = on_update
        self._sequencer = PipelineSequencer()

    async def _emit(self, run: PipelineRun) -> PipelineRun:
        if self._on_update is not None:
            try:
                await self._on_update(run)
            except Exception:
                logger.warning("Pipeline update listener failed (non-fatal)", exc_info=True)
        return run

    async def _call(self, error_cls: type[StageError], call: Awaitable):
        """Await one stage under the per-stage deadline, as a ``StageError`` on failure."""
        try:
            return await asyncio.wait_for(call, timeout=self.stage_timeout or None)
        except StageError:
            raise
        except TimeoutError as exc:
            raise error_cls(
                f"{error_cls.label} timed out after {self.stage_timeout:g}s", cause=exc
            ) from exc
        except Exception as exc:
            raise error_cls(cause=exc) from exc

    async def run(self, recording: Recording) -> PipelineRun:
        """Run all four stages for ``recording``.

        Returns:
            The succeeded ``PipelineRun``.

        Raises:
            StageError: The first stage failure, unchanged. The failed run
                snapshot (with any earlier results) has already been sent to
                ``on_update``.
        """
        seq = self._sequencer
        run = await self._emit(seq.begin(PipelineRun(recording=recording)))
        logger.info(
            "Pipeline %s started (%d bytes, %s)",
            run.run_id,
            len(recording.data),
            recording.mime_type,
        )

        try:
            audio = await self._call(
                UploadError,
                self._backend.upload_audio(recording.data, recording.mime_type),
            )
            run = await self._emit(seq.uploaded(run, audio))

            transcription = await self._call(
                TranscriptionError,
                self._backend.transcribe_audio(audio.url, self.source_language),
            )
            run = await self._emit(seq.transcribed(run, transcription))

            translation = await self._call(
                TranslationError,
                self._backend.translate_text(transcription.text, self.target_language),
            )
            run = await self._emit(seq.translated(run, translation))

            summary = await self._call(
                SummaryError,
                self._backend.generate_summary(
                    transcription.text, self.summary_type, self.summary_language
                ),
            )
            run = await self._emit(seq.summarized(run, summary))
        except StageError as exc:
            await self._emit(seq.fail(run, exc))
            logger.warning("Pipeline %s failed at %s: %s", run.run_id, exc.stage, exc.detail)
            raise

        logger.info("Pipeline %s succeeded", run.run_id)
        return run

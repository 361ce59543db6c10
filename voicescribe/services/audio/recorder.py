"""Microphone recorder with an ``idle -> recording -> processing`` state machine.

The input device delivers audio on its own callback thread while the recorder is
``recording``; the buffered chunks are joined in arrival order when
``stop()`` is called and the resulting Recording is handed to the pipeline
callback. The input device is held only between ``start()`` and ``stop()``.
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from voicescribe.core.exceptions import RecorderBusyError
from voicescribe.core.models import PipelineRun, RecorderState, Recording
from voicescribe.services.audio.processor import AudioProcessor

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]
RecordingHandler = Callable[[Recording], Awaitable[PipelineRun]]


class AudioSource(ABC):
    """An input device that pushes raw 16-bit PCM chunks to a callback."""

    sample_rate: int = 16000
    channels: int = 1
    sample_width: int = 2

    @abstractmethod
    def open(self, on_chunk: ChunkCallback) -> None:
        """Acquire the device and start delivering chunks.

        Raises:
            PermissionDeniedError: If the device cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Stop delivery and release the device. Safe to call twice."""


class Recorder:
    """Captures one recording at a time and triggers the pipeline on stop.

    Args:
        source: Input device.
        on_recording: Awaited with the finished Recording; typically
            ``PipelineOrchestrator.run``.
    """

    def __init__(self, source: AudioSource, on_recording: RecordingHandler) -> None:
        self._source = source
        self._on_recording = on_recording
        self._processor = AudioProcessor(
            sample_rate=source.sample_rate,
            sample_width=source.sample_width,
            channels=source.channels,
        )
        self._state = RecorderState.idle
        self._chunks: list[bytes] = []
        self._lock = threading.Lock()
        self.last_recording: Recording | None = None

    @property
    def state(self) -> RecorderState:
        return self._state

    def _on_chunk(self, data: bytes) -> None:
        with self._lock:
            if self._state is RecorderState.recording:
                self._chunks.append(data)

    def start(self) -> None:
        """Open the microphone and begin buffering.

        Raises:
            RecorderBusyError: If a capture or its pipeline is still running.
            PermissionDeniedError: If the device refuses; state stays ``idle``.
        """
        if self._state is not RecorderState.idle:
            raise RecorderBusyError(self._state)

        self.last_recording = None
        with self._lock:
            self._chunks = []
            self._state = RecorderState.recording
        try:
            self._source.open(self._on_chunk)
        except Exception:
            with self._lock:
                self._state = RecorderState.idle
            logger.warning("Microphone could not be opened")
            raise
        logger.info("Recording started")

    def _finalize(self) -> Recording:
        with self._lock:
            pcm = b"".join(self._chunks)
            pcm = pcm[: len(pcm) - len(pcm) % self._processor.frame_size]
            self._chunks = []
            self._state = RecorderState.processing

        if self._processor.is_silent(self._processor.pcm_to_ndarray(pcm)):
            logger.warning("Captured audio is silent or empty (%d bytes)", len(pcm))

        return Recording(
            data=self._processor.to_wav_bytes(pcm),
            mime_type="audio/wav",
            duration=self._processor.duration_of(pcm),
        )

    async def stop(self) -> PipelineRun | None:
        """Release the microphone and run the pipeline on the capture.

        A no-op returning ``None`` unless the recorder is ``recording``.
        The recorder is back to ``idle`` when this returns or raises.
        """
        if self._state is not RecorderState.recording:
            return None

        try:
            self._source.close()
        except Exception:
            with self._lock:
                self._chunks = []
                self._state = RecorderState.idle
            raise
        recording = self._finalize()
        self.last_recording = recording
        logger.info("Recording stopped: %.1fs captured", recording.duration)

        try:
            return await self._on_recording(recording)
        finally:
            self._state = RecorderState.idle

"""PyAudio (PortAudio) microphone source.

Imported lazily through ``create_audio_source`` so that the server and the
tests do not need PortAudio installed.
"""

import logging

import pyaudio

from voicescribe.core.exceptions import PermissionDeniedError
from voicescribe.services.audio.recorder import AudioSource, ChunkCallback

logger = logging.getLogger(__name__)


class PyAudioSource(AudioSource):
    """Default input device via PyAudio in callback mode.

    Args:
        sample_rate: Capture rate in Hz (16 kHz suits speech recognition).
        channels: Number of channels (1 = mono).
        frames_per_buffer: Frames per callback chunk.
        device_index: Input device; ``None`` uses the system default.
    """

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        frames_per_buffer: int = 1024,
        device_index: int | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.sample_width = 2
        self._frames_per_buffer = frames_per_buffer
        self._device_index = device_index
        self._pa: pyaudio.PyAudio | None = None
        self._stream = None

    def open(self, on_chunk: ChunkCallback) -> None:
        def _callback(in_data, frame_count, time_info, status):
            on_chunk(in_data)
            return (None, pyaudio.paContinue)

        try:
            self._pa = pyaudio.PyAudio()
            self._stream = self._pa.open(
                format=pyaudio.paInt16,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self._frames_per_buffer,
                input_device_index=self._device_index,
                stream_callback=_callback,
            )
            self._stream.start_stream()
        except (OSError, ValueError) as exc:
            # PortAudio reports a refused or missing input device as OSError
            self.close()
            raise PermissionDeniedError(f"Could not open microphone: {exc}") from exc
        logger.debug("Opened input device %s at %d Hz", self._device_index, self.sample_rate)

    def close(self) -> None:
        if self._stream is not None:
            try:
                self._stream.stop_stream()
            finally:
                self._stream.close()
                self._stream = None
        if self._pa is not None:
            self._pa.terminate()
            self._pa = None

"""Audio processing utilities for PCM data.

Converts raw PCM bytes to numpy arrays, wraps them in a WAV container and
provides silence detection.
"""

import io
import wave

import numpy as np


class AudioProcessor:
    """Handles PCM audio data conversion and analysis."""

    def __init__(
        self,
        sample_rate: int = 16000,
        sample_width: int = 2,
        channels: int = 1,
    ) -> None:
        """Initialize the audio processor.

        Args:
            sample_rate: Audio sample rate in Hz (default: 16 kHz).
            sample_width: Bytes per sample (2 = 16-bit signed PCM).
            channels: Number of audio channels (1 = mono).
        """
        self.sample_rate = sample_rate
        self.sample_width = sample_width
        self.channels = channels

    @property
    def frame_size(self) -> int:
        return self.sample_width * self.channels

    def duration_of(self, pcm_data: bytes) -> float:
        """Duration in seconds of ``pcm_data``."""
        return len(pcm_data) / (self.frame_size * self.sample_rate)

    def pcm_to_ndarray(self, pcm_data: bytes) -> np.ndarray:
        """Convert raw PCM bytes (16-bit signed) to float32 numpy array.

        Args:
            pcm_data: Raw PCM bytes (16-bit).

        Returns:
            Float32 numpy array normalized to [-1.0, 1.0].

        Raises:
            ValueError: If data length is not aligned to sample frame size.
        """
        if len(pcm_data) % self.frame_size != 0:
            raise ValueError(
                f"PCM data length ({len(pcm_data)}) is not aligned to frame size ({self.frame_size})"
            )
        return np.frombuffer(pcm_data, dtype=np.int16).astype(np.float32) / 32768.0

    def to_wav_bytes(self, pcm_data: bytes) -> bytes:
        """Wrap raw PCM bytes in an in-memory WAV container."""
        buf = io.BytesIO()
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(self.channels)
            wf.setsampwidth(self.sample_width)
            wf.setframerate(self.sample_rate)
            wf.writeframes(pcm_data)
        return buf.getvalue()

    def is_silent(self, audio: np.ndarray, threshold: float = 0.01) -> bool:
        """Check if an audio segment is silence based on RMS energy.

        Args:
            audio: Float32 numpy array of audio samples.
            threshold: RMS energy below this value is considered silence.

        Returns:
            True if the audio is silence.
        """
        if len(audio) == 0:
            return True
        rms = np.sqrt(np.mean(audio**2))
        return float(rms) < threshold

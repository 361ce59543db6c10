"""
Audio module - microphone capture and PCM utilities.
"""

from .processor import AudioProcessor
from .recorder import AudioSource, Recorder

__all__ = ["AudioProcessor", "AudioSource", "Recorder", "create_audio_source"]


def create_audio_source(**kwargs) -> AudioSource:
    """
    Factory function for the default microphone source.

    Args:
        **kwargs: Passed to ``PyAudioSource`` (sample_rate, device_index, ...)

    Returns:
        AudioSource backed by PyAudio
    """
    from .microphone import PyAudioSource

    return PyAudioSource(**kwargs)

"""VoiceScribe: record speech, then transcribe, translate and summarize it."""

__version__ = "0.1.0"

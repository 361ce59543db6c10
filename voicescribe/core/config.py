"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

# A short leading acknowledgment (at most three lines of up to 200 characters)
# closed by a line that is just "---". Longer openings are summary content.
DEFAULT_PREAMBLE_PATTERNS = [r"\A(?:[^\n]{0,200}\n){0,3}?[ \t]*---[ \t]*$"]


class Settings(BaseSettings):
    """VoiceScribe application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        llm_provider: Which LLM backend to use ("claude" or "ollama").
        stt_provider: Speech-to-text backend ("openai" Whisper API).
        stage_timeout_seconds: Deadline for each pipeline stage call.
        preamble_patterns: Regexes tried in order to strip an acknowledgment
            preamble from summaries.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- LLM Provider ---
    # Selects the LLM backend: "claude" for Anthropic API, "ollama" for a hosted Ollama server
    llm_provider: str = "claude"

    # Claude (Anthropic API) settings
    claude_api_key: str = ""  # Required when llm_provider="claude"
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama settings
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # --- Speech-to-text ---
    stt_provider: str = "openai"
    openai_api_key: str = ""  # Required when stt_provider="openai"
    openai_stt_model: str = "whisper-1"

    # --- Pipeline ---
    source_language: str = "en"  # Language hint sent with every transcription
    default_target_language: str = "ja"
    default_summary_type: str = "medium"  # short, medium, detailed
    stage_timeout_seconds: float = 120.0
    preamble_patterns: list[str] = list(DEFAULT_PREAMBLE_PATTERNS)

    # --- Storage ---
    # Paths are relative to the project root; absolute paths also supported
    media_dir: str = "data/media"  # Uploaded audio blobs
    public_base_url: str = "http://localhost:8000"  # Prefix for /media/{key} URLs
    database_url: str = "sqlite+aiosqlite:///data/voicescribe.db"
    history_enabled: bool = True  # Keep a copy of each transcription in the DB

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # --- Client ---
    api_base_url: str = "http://localhost:8000"  # Used by the CLI recorder


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()

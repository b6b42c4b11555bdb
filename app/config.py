"""Application configuration. Loads from env vars."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings. Override via environment variables."""

    # Segmentation: one debounce window per session (2-5s typical)
    SILENCE_WINDOW_SECONDS: float = 2.0
    # On stop: finalize the in-progress utterance instead of dropping it
    FLUSH_ON_STOP: bool = False

    # Profile store: AI config + resume/job description (one JSON file, best-effort)
    PROFILE_STORE_PATH: str = "./data/profile.json"

    # Session transcript storage: one .txt per WebSocket, append-only (finalized turns only).
    TRANSCRIPT_SAVE_ENABLED: bool = True
    TRANSCRIPT_DIR: str = "./transcripts"
    TRANSCRIPT_ADD_TIMESTAMPS: bool = False  # prefix each line with [MM:SS.ss]

    # Answer generation (provider/model/key come from the stored AI config)
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_MAX_TOKENS: int = 500
    LLM_TEMPERATURE: float = 0.7
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com/v1"
    ANTHROPIC_VERSION: str = "2023-06-01"
    OLLAMA_DEFAULT_URL: str = "http://localhost:11434"

    # Server (python -m app)
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Logging: level (DEBUG, INFO, WARNING, ERROR); file path = also log to file (empty = console only).
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Acquisition service (yt download microservice)
    acquisition_service_url: str = "http://localhost:8000/download"
    acquisition_timeout: float | None = None  # downloads can take minutes

    # Speech-to-text (fal.ai queue)
    fal_key: str = ""
    fal_queue_url: str = "https://queue.fal.run"
    transcription_model_id: str = "fal-ai/elevenlabs/speech-to-text"
    transcription_language: str = "en"
    transcription_poll_interval: float = 1.0

    # Completion provider (OpenAI-compatible, Together AI by default)
    completion_api_key: str = ""
    completion_base_url: str = "https://api.together.xyz/v1"
    completion_model: str = "deepseek-ai/DeepSeek-V3"
    completion_max_tokens: int = 1500
    completion_temperature: float = 0.3
    completion_top_p: float = 0.9

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    log_level: str = "INFO"
    log_format: str = "structured"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()

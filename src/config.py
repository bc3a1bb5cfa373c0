"""Service configuration.

Settings are loaded once from the environment (and an optional .env file).
The pipelines never read the environment themselves: the API lifespan turns
Settings into the frozen GenerationConfig / TranscriptionConfig objects below
and passes them into the orchestrators.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.llm.retry import RetryPolicy


class Settings(BaseSettings):
    """Application settings validated via Pydantic."""

    # Model endpoint
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"

    # Presentation generation
    generation_max_retries: int = 2
    generation_initial_delay_ms: int = 1000
    generation_timeout_ms: int = 60_000
    generation_temperature: float = 0.3
    generation_max_output_tokens: int = 8192
    min_source_length: int = 10
    min_sections: int = 3

    # Audio transcription (faster calls, so a shorter timeout)
    transcription_max_retries: int = 3
    transcription_initial_delay_ms: int = 1000
    transcription_timeout_ms: int = 45_000
    transcription_max_output_tokens: int = 4096

    # API
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


@dataclass(frozen=True)
class GenerationConfig:
    """Knobs for one PresentationGenerator."""

    retry: RetryPolicy = RetryPolicy(max_retries=2, initial_delay_ms=1000)
    timeout_ms: int = 60_000
    temperature: float = 0.3
    max_output_tokens: int = 8192
    min_source_length: int = 10
    min_sections: int = 3

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GenerationConfig":
        settings = settings or get_settings()
        return cls(
            retry=RetryPolicy(
                max_retries=settings.generation_max_retries,
                initial_delay_ms=settings.generation_initial_delay_ms,
            ),
            timeout_ms=settings.generation_timeout_ms,
            temperature=settings.generation_temperature,
            max_output_tokens=settings.generation_max_output_tokens,
            min_source_length=settings.min_source_length,
            min_sections=settings.min_sections,
        )


@dataclass(frozen=True)
class TranscriptionConfig:
    """Knobs for one AudioTranscriber."""

    retry: RetryPolicy = RetryPolicy(max_retries=3, initial_delay_ms=1000)
    timeout_ms: int = 45_000
    max_output_tokens: int = 4096

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "TranscriptionConfig":
        settings = settings or get_settings()
        return cls(
            retry=RetryPolicy(
                max_retries=settings.transcription_max_retries,
                initial_delay_ms=settings.transcription_initial_delay_ms,
            ),
            timeout_ms=settings.transcription_timeout_ms,
            max_output_tokens=settings.transcription_max_output_tokens,
        )

"""
Configuration management for the Quiz Grader system.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The remote similarity delegate is optional. Grading works fully offline
    with the local heuristic when it is disabled or unconfigured.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Grading Configuration
    # ==========================================================================
    translations_file: Path | None = Field(
        default=None,
        description="JSON file with extra canonical term -> variants entries",
    )

    batch_max_workers: int = Field(
        default=4,
        ge=1,
        le=32,
        description="Worker threads used when regrading a batch of answers",
    )

    # ==========================================================================
    # Similarity Delegate Configuration
    # ==========================================================================
    semantic_delegate_enabled: bool = Field(
        default=False,
        description="Consult the remote similarity service before the local heuristic",
    )

    openai_api_key: str | None = Field(
        default=None,
        description="API key for the OpenAI-compatible similarity endpoint",
    )

    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL for the OpenAI-compatible API",
    )

    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model used to compare answers",
    )

    delegate_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Temperature for the similarity model",
    )

    delegate_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=60.0,
        description="Upper bound for a single delegate request",
    )

    delegate_max_retries: int = Field(
        default=1,
        ge=0,
        le=3,
        description="Retries for transient delegate failures before falling back",
    )

    @field_validator("openai_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Ensure base URL doesn't have trailing slash."""
        return v.rstrip("/")

    @field_validator("translations_file")
    @classmethod
    def validate_translations_file(cls, v: Path | None) -> Path | None:
        """Ensure the translations file exists when configured."""
        if v is not None and not v.is_file():
            raise ValueError(f"Translations file not found: {v}")
        return v

    @property
    def delegate_configured(self) -> bool:
        """Whether the remote delegate is enabled and has credentials."""
        return self.semantic_delegate_enabled and bool(self.openai_api_key)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()

# src/config/settings.py — v2
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for provider selection, retry policy, cache sizing
and logging. The settings store of the host application feeds the same
fields through environment variables or explicit overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDER ===
    llm_provider: Literal["openai", "google", "gemini"] = "openai"
    llm_model: str = ""
    llm_temperature: float = 0.7
    llm_max_tokens: int = 500
    llm_answer_max_tokens: int = 1000

    # Provider API keys
    openai_api_key: str = ""
    google_api_key: str = ""

    # === Retry policy ===
    retry_max_attempts: int = 3
    retry_base_delay_s: float = 1.0

    # === Cache ===
    cache_enabled: bool = True
    cache_ttl_s: float = 3600.0
    cache_max_entries: int = 100

    # === Batch ===
    batch_concurrency: int = 5

    # === Prompt templates ===
    template_dir: Path | None = None

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("cache_max_entries", "batch_concurrency", "retry_max_attempts")
    @classmethod
    def validate_positive(cls, v: int) -> int:  # noqa: N805
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @field_validator("retry_base_delay_s", "cache_ttl_s")
    @classmethod
    def validate_non_negative(cls, v: float) -> float:  # noqa: N805
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Cross-field consistency rules."""
        errors: list[str] = []

        if self.llm_max_tokens < 1 or self.llm_answer_max_tokens < 1:
            errors.append("LLM_MAX_TOKENS and LLM_ANSWER_MAX_TOKENS must be >= 1")

        if not 0.0 <= self.llm_temperature <= 2.0:
            errors.append("LLM_TEMPERATURE must be within [0, 2]")

        if self.template_dir is not None and self.template_dir.exists() and not self.template_dir.is_dir():
            errors.append("TEMPLATE_DIR must point to a directory")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier ('gemini' is an alias of 'google')."""
        return "google" if self.llm_provider == "gemini" else self.llm_provider

    def api_key_for(self, provider: str) -> str:
        """Return the configured API key for a provider name or alias."""
        if provider in ("google", "gemini"):
            return self.google_api_key
        if provider == "openai":
            return self.openai_api_key
        return ""


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or per-request config).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]

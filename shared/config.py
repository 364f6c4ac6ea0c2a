"""
Configuration management.

Centralized environment variable management and validation.
"""

from typing import Literal, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from shared.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # Allow case-insensitive env var matching
        extra="ignore"
    )

    # OpenAI-compatible generative backend
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7
    openai_timeout: float = 120.0
    openai_max_retries: int = 2  # SDK transport retries, not code repair

    # Output
    output_dir: str = "./output"

    # Chapter repair loop
    max_retries: int = 2

    # Rendering and muxing toolchain
    manim_binary: str = "manim"
    manim_timeout: int = 60
    ffmpeg_binary: str = "ffmpeg"
    mux_timeout: int = 300
    scratch_dir: str = "./.scratch"
    media_dir: str = "./media"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("openai_base_url")
    @classmethod
    def validate_openai_base_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate OpenAI base URL format."""
        if not v:
            return None
        if not v.startswith(("http://", "https://")):
            raise ConfigError("OPENAI_BASE_URL must be a valid HTTP/HTTPS URL")
        return v

    @field_validator("openai_temperature")
    @classmethod
    def validate_openai_temperature(cls, v: float) -> float:
        """Validate sampling temperature range."""
        if v < 0 or v > 2:
            raise ConfigError("OPENAI_TEMPERATURE must be between 0 and 2")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        """Validate retry budget."""
        if v < 0:
            raise ConfigError("MAX_RETRIES must be a non-negative number")
        return v

    @field_validator("manim_timeout", "mux_timeout")
    @classmethod
    def validate_timeouts(cls, v: int) -> int:
        """Validate tool timeouts."""
        if v <= 0:
            raise ConfigError("Timeouts must be positive numbers of seconds")
        return v


def validate_config(config: Optional[Settings] = None) -> None:
    """
    Validate settings required to start a run.

    Args:
        config: Settings to check (default: module singleton)

    Raises:
        ConfigError: If a required setting is missing
    """
    config = config or settings
    if not config.openai_api_key:
        raise ConfigError(
            "OPENAI_API_KEY is required. Please create a .env file with your OpenAI API key."
        )


# Singleton instance
try:
    settings = Settings()
except Exception as e:
    # Re-raise as ConfigError for consistency
    if isinstance(e, ConfigError):
        raise
    raise ConfigError(f"Failed to load configuration: {str(e)}") from e

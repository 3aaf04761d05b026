"""
Configuration management using Pydantic Settings.

Loads configuration from environment variables and .env files
with validation and type conversion.

The search and RUT functions never read settings themselves; every
threshold they need is passed in by the caller. Settings only provide the
defaults used by the CLI and by AdvancedSearch sessions.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackofficeSettings(BaseSettings):
    """
    Application settings loaded from environment variables and .env files.

    Settings are loaded in this order of precedence:
    1. Environment variables
    2. .env file in current directory
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(
        default="json",
        description="Log output format (json, text)"
    )

    service_name: str = Field(
        default="course-backoffice",
        description="Service name for logging"
    )

    environment: str = Field(
        default="development",
        description="Environment name (development, staging, production)"
    )

    # Search Configuration
    search_debounce_ms: int = Field(
        default=300,
        ge=0,
        le=5000,
        description="Delay hosts should wait after a keystroke before querying"
    )

    default_items_per_page: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Page size used when the caller does not request one"
    )

    # Course approval rules
    min_attendance_pct: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="Minimum attendance percentage required to pass a course"
    )

    min_passing_grade: float = Field(
        default=4.0,
        ge=1.0,
        le=7.0,
        description="Minimum grade (Chilean 1.0-7.0 scale) required to pass"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(valid_levels))}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Validate log format is supported."""
        valid_formats = {"json", "text"}
        if v.lower() not in valid_formats:
            raise ValueError(f"log_format must be one of: {', '.join(sorted(valid_formats))}")
        return v.lower()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment name."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of: {', '.join(sorted(valid_envs))}")
        return v.lower()


@lru_cache()
def get_settings() -> BackofficeSettings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading configuration files
    on every function call.
    """
    return BackofficeSettings()


settings = get_settings

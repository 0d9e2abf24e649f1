"""
Application configuration using Pydantic Settings.

Loads configuration from STREAMGUARD_* environment variables and .env file.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PARALLEL_THRESHOLD = 10_000


class Settings(BaseSettings):
    """Library settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="STREAMGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="streamguard", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # Rule checking
    parallel_threshold: int = Field(
        default=DEFAULT_PARALLEL_THRESHOLD,
        description="Element count below which a parallel stage is flagged",
    )
    rules_file: str | None = Field(
        default=None,
        description="Optional project rule override file (YAML)",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env.lower() == "production"

    @field_validator("parallel_threshold")
    @classmethod
    def _validate_threshold(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("parallel_threshold must be a positive integer")
        return value


# Global settings instance
settings = Settings()

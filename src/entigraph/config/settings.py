"""Library settings using Pydantic Settings."""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """entigraph configuration, read from ENTIGRAPH_* environment variables."""

    # Normalization
    strict_normalization: bool = False  # raise on the first bad field/record instead of skipping it

    # Schema building
    query_type_name: str = "Query"

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_prefix="ENTIGRAPH_",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None

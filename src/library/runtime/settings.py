"""Process-level settings read from environment variables and .env files.

These values decide *which* configuration gets loaded; everything else lives
in config.yaml and is parsed into ConfigData.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    config_file: str = Field(default="config.yaml", validation_alias="APP_CONFIG_FILE")

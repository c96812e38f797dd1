"""
Renderer Settings
=================

Static renderer configuration loaded from the environment using Pydantic Settings.
Supports development, testing, and production environments.
"""

import tempfile
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Renderer settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Image Renderer", description="Application name")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")
    verbose_logging: bool = Field(
        default=False, description="Log browser console, request and page lifecycle events"
    )

    # Browser Configuration
    timezone: Optional[str] = Field(
        default=None, description="Default TZ for the browser when a request sets none"
    )
    ignores_https_errors: bool = Field(
        default=False, description="Ignore TLS certificate errors while rendering"
    )
    chrome_bin: Optional[str] = Field(default=None, description="Chromium executable override")
    headless: bool = Field(default=True, description="Run browser in headless mode")

    # Storage Configuration
    temp_path: Path = Field(
        default_factory=lambda: Path(tempfile.gettempdir()),
        description="Directory for generated output files",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("chrome_bin", "timezone")
    @classmethod
    def empty_as_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty environment values as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @field_validator("temp_path")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure the output directory exists."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="RENDERER_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings

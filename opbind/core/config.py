"""Centralized configuration management with environment-aware defaults.

This module implements the configuration system using Pydantic Settings,
providing type-safe configuration with validation and environment variable
support.

Configuration sources (in order of precedence):
1. Environment variables
2. .env file in project root
3. Default values in model definitions
4. Environment-based defaults (production vs development)
"""

import os
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def detect_formatter(environment: str) -> Literal["console", "json"]:
    """Auto-detect the log formatter for the deployment environment.

    Args:
        environment: The configured application environment.

    Returns:
        Literal["console", "json"]: JSON on managed runtimes and outside
            development, console otherwise.
    """
    # Managed runtimes collect stdout as structured logs
    if os.getenv("K_SERVICE") or os.getenv("AWS_EXECUTION_ENV"):
        return "json"

    if environment == "development":
        return "console"
    return "json"


class LogConfig(BaseModel):
    """Simplified logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )
    sensitive_fields: list[str] = Field(
        default_factory=lambda: [
            "password",
            "token",
            "secret",
            "api_key",
            "authorization",
        ],
        description="Field names to redact",
    )


class RepresenterConfig(BaseModel):
    """Rendering behavior shared by all representers."""

    render_none: bool = Field(
        default=False,
        description="Render None values as null instead of skipping the key",
    )


class Settings(BaseSettings):
    """Main settings class for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="opbind", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=True, description="Debug mode flag")

    # Logging configuration
    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    # Representer configuration
    representer_config: RepresenterConfig = Field(
        default_factory=RepresenterConfig, description="Representer configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = detect_formatter(self.environment)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

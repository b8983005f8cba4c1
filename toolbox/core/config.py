"""
Core configuration module for the toolbox runtime.

This module handles all configuration settings using Pydantic Settings
with support for environment variables and a local .env file.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from .auth import DEFAULT_AUTH_TOKEN_HEADER


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    TOOLBOX_ prefix (e.g., TOOLBOX_LOG_LEVEL=DEBUG).
    """

    # Environment
    ENVIRONMENT: str = Field(default="development", description="Environment name (development, staging, production)")
    DEBUG: bool = Field(default=False, description="Enable debug mode")

    # Logging
    LOG_LEVEL: str = Field(default="WARNING", description="Logging level")
    LOG_FORMAT: Literal["text", "json"] = Field(default="text", description="Log output format")

    # Tools
    TOOLS_FILE: Optional[str] = Field(default=None, description="Path to the YAML tools file loaded at startup")
    INVOCATION_TIMEOUT_SECONDS: Optional[float] = Field(
        default=30.0,
        description="Per-invocation timeout; unset to let the caller's own cancellation govern",
    )

    # Auth
    AUTH_TOKEN_HEADER: str = Field(default=DEFAULT_AUTH_TOKEN_HEADER, description="Header carrying the caller's access token")

    model_config = {
        "env_prefix": "TOOLBOX_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching.

    The @lru_cache decorator ensures that this function returns the same
    Settings instance for the lifetime of the application.
    """
    return Settings()

"""
Application Configuration

Uses pydantic-settings for environment variable loading with validation.
The calculation engine itself reads nothing from here; only the service
and router layers do.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="ROI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Runtime environment"
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG shows why workflows calculate to zero)"
    )

    # ==========================================================================
    # ROI Defaults
    # ==========================================================================
    default_currency_code: str = Field(
        default="GBP",
        description="Currency used when neither the workflow config nor the request names one"
    )

    common_cost_keywords: str = Field(
        default="database,hosting,supabase,llm tokens",
        description="Comma-separated tool name fragments grouped as common running costs"
    )

    @computed_field
    @property
    def common_cost_keywords_list(self) -> list[str]:
        """Parse common cost keywords into a lowercase list."""
        return [
            keyword.strip().lower()
            for keyword in self.common_cost_keywords.split(",")
            if keyword.strip()
        ]

    # ==========================================================================
    # Server
    # ==========================================================================
    host: str = Field(
        default="0.0.0.0",
        description="Server host"
    )

    port: int = Field(
        default=8000,
        description="Server port"
    )

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @computed_field
    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()

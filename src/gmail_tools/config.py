"""Configuration management for Gmail Tools.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the GMAIL_TOOLS_ prefix (e.g., GMAIL_TOOLS_GMAIL_TOKEN_PATH).
    """

    model_config = SettingsConfigDict(
        env_prefix="GMAIL_TOOLS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Gmail Configuration
    gmail_credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to Gmail API OAuth client secrets file",
    )
    gmail_token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the stored Gmail API token file",
    )
    gmail_scope: str = Field(
        default="https://www.googleapis.com/auth/gmail.modify",
        description=(
            "OAuth scope used for Gmail access. Labelling and sending need "
            "gmail.modify; delete token.json after changing it."
        ),
    )
    gmail_user_id: str = Field(
        default="me",
        description="Gmail user id passed to every API call",
    )
    gmail_max_results: int = Field(
        default=100,
        description="Page size used when listing messages",
    )

    # Message parsing
    default_body_type: Literal["plain", "html"] = Field(
        default="plain",
        description="Body content type extracted when fetching a message",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()

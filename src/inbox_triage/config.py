"""Configuration management for Inbox Triage.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INBOX_TRIAGE_ prefix (e.g., INBOX_TRIAGE_FETCH_LIMIT).
    """

    model_config = SettingsConfigDict(
        env_prefix="INBOX_TRIAGE_",
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
        description="Path to the cached Gmail API token file",
    )
    gmail_scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/gmail.readonly",
            "https://www.googleapis.com/auth/userinfo.profile",
        ],
        description=(
            "OAuth scopes requested at sign-in. Mail is only ever read; the profile "
            "scope is used to show the signed-in user's name and avatar."
        ),
    )

    # Ingestion Configuration
    inbox_query: str = Field(
        default="in:inbox",
        description="Gmail search query used to list inbox messages",
    )
    list_limit: int = Field(
        default=100,
        ge=1,
        description="Maximum number of message ids requested from the listing call",
    )
    fetch_limit: int = Field(
        default=50,
        ge=1,
        description="Number of listed messages whose full bodies are fetched",
    )
    max_concurrency: int = Field(
        default=10,
        ge=1,
        description="Maximum number of concurrent message body requests",
    )

    # View Configuration
    default_max_age_days: int = Field(
        default=7,
        ge=0,
        description="Initial age window (in days) of the email list",
    )
    preferences_db_path: Path = Field(
        default=Path("inbox_triage.sqlite3"),
        description="Path to the SQLite database storing UI preferences (theme, layout)",
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
    max_retries: int = Field(
        default=3,
        ge=0,
        description="Maximum number of retries for failed Gmail API requests",
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Initial delay in seconds between Gmail API retries",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()

"""Pydantic Settings model for application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from github_notion_sync.utils.concurrency import DEFAULT_MAX_CONCURRENCY
from github_notion_sync.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_REQUEST_TIMEOUT


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    MAX_CONCURRENCY: int = DEFAULT_MAX_CONCURRENCY
    REQUEST_TIMEOUT: float = DEFAULT_REQUEST_TIMEOUT

    # GitHub API settings
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL
    GITHUB_TOKEN: str | None = None

    # Notion API settings
    NOTION_TOKEN: str | None = None
    NOTION_DATABASE_ID: str | None = None

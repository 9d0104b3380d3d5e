"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass

from github_notion_sync.utils.concurrency import DEFAULT_MAX_CONCURRENCY
from github_notion_sync.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_REQUEST_TIMEOUT


@dataclass(frozen=True)
class SyncConfig:
    """Resolved configuration for a synchronization run."""

    notion_token: str
    notion_database_id: str
    github_token: str
    github_api_url: str = DEFAULT_GITHUB_API_URL
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    debug: bool = False

"""Reconciles configuration between CLI arguments and environment variables."""

from github_notion_sync.configuration.env import Settings
from github_notion_sync.configuration.exceptions import RequiredConfigurationElementError
from github_notion_sync.configuration.models import SyncConfig


async def validate_sync_configuration(
    notion_token: str | None,
    notion_database_id: str | None,
    github_token: str | None,
    github_api_url: str | None = None,
    max_concurrency: int | None = None,
    request_timeout: float | None = None,
    debug: bool | None = None,
    settings: Settings | None = None,
) -> SyncConfig:
    """Validates the synchronization configuration, preferring CLI values over environment settings.

    Args:
        notion_token (str | None): The Notion integration token.
        notion_database_id (str | None): The ID of the Notion database to synchronize into.
        github_token (str | None): The GitHub token.
        github_api_url (str | None): The GitHub API URL.
        max_concurrency (int | None): Maximum number of concurrent page creations.
        request_timeout (float | None): Per-request timeout in seconds.
        debug (bool | None): Whether debug logging is enabled.
        settings (Settings | None): Environment settings used for any value not given directly.

    Raises:
        RequiredConfigurationElementError: If a token or the database ID is missing or empty.
        ValueError: If max_concurrency or request_timeout is not positive.

    Returns:
        SyncConfig: The resolved configuration.
    """
    settings = settings if settings is not None else Settings()
    notion_token = notion_token or settings.NOTION_TOKEN
    notion_database_id = (notion_database_id or settings.NOTION_DATABASE_ID or "").strip()
    github_token = github_token or settings.GITHUB_TOKEN

    if not notion_database_id:
        raise RequiredConfigurationElementError("Notion database ID", "--notion-database-id", "NOTION_DATABASE_ID")
    if not notion_token:
        raise RequiredConfigurationElementError("Notion token", "--notion-token", "NOTION_TOKEN")
    if not github_token:
        raise RequiredConfigurationElementError("GitHub token", "--github-token", "GITHUB_TOKEN")

    resolved_max_concurrency = max_concurrency if max_concurrency is not None else settings.MAX_CONCURRENCY
    if resolved_max_concurrency < 1:
        raise ValueError(f"Maximum concurrency must be at least 1, got {resolved_max_concurrency}")
    resolved_request_timeout = request_timeout if request_timeout is not None else settings.REQUEST_TIMEOUT
    if resolved_request_timeout <= 0:
        raise ValueError(f"Request timeout must be positive, got {resolved_request_timeout}")

    return SyncConfig(
        notion_token=notion_token,
        notion_database_id=notion_database_id,
        github_token=github_token,
        github_api_url=github_api_url or settings.GITHUB_API_URL,
        max_concurrency=resolved_max_concurrency,
        request_timeout=resolved_request_timeout,
        debug=debug if debug is not None else settings.DEBUG,
    )

"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio

from github_notion_sync.configuration import reconcile
from github_notion_sync.configuration.models import SyncConfig


def get_sync_config(
    notion_token: str | None = None,
    notion_database_id: str | None = None,
    github_token: str | None = None,
    github_api_url: str | None = None,
    max_concurrency: int | None = None,
    request_timeout: float | None = None,
    debug: bool | None = None,
) -> SyncConfig:
    """Synchronously get the reconciled synchronization configuration."""
    return asyncio.run(
        reconcile.validate_sync_configuration(
            notion_token=notion_token,
            notion_database_id=notion_database_id,
            github_token=github_token,
            github_api_url=github_api_url,
            max_concurrency=max_concurrency,
            request_timeout=request_timeout,
            debug=debug,
        )
    )

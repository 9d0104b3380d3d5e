"""Sets up the authenticated Notion client."""

import logging

from notion_client import AsyncClient

from github_notion_sync.utils.constants import DEFAULT_REQUEST_TIMEOUT


async def get_notion_client(notion_token: str, timeout: float = DEFAULT_REQUEST_TIMEOUT, debug: bool = False) -> AsyncClient:
    """Returns a Notion client authenticated with an integration token.

    Raises RuntimeError if no token is provided.
    """
    if not notion_token:
        raise RuntimeError("Notion authentication requires a Notion token.")
    return AsyncClient(
        auth=notion_token,
        timeout_ms=int(timeout * 1000),
        log_level=logging.DEBUG if debug else logging.WARNING,
    )

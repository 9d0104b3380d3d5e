"""Notion client adapter for the notion-client library."""

from functools import wraps
from typing import Any, Awaitable, Callable, Self, TypeVar

import structlog
from notion_client import APIErrorCode, APIResponseError, AsyncClient

from github_notion_sync.utils.constants import DEFAULT_REQUEST_TIMEOUT, NOTION_MAX_PAGE_SIZE
from github_notion_sync.utils.retry import retry_on_rate_limit

from .abc import NotionClientBase
from .client import get_notion_client

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_notion_validation_error(func: F) -> F:
    """Decorator to handle Notion validation errors, logging and raising with details."""

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except APIResponseError as exc:
            if exc.code == APIErrorCode.ValidationError:
                logger.error(
                    "Notion validation error",
                    function=func.__name__,
                    message=str(exc),
                    status_code=exc.status,
                )
                raise ValueError(f"Notion validation error in {func.__name__}: {exc}") from exc
            raise

    return wrapper  # type: ignore


class NotionAdapter(NotionClientBase):
    """Notion client adapter for the notion-client library."""

    def __init__(self, client: AsyncClient) -> None:
        """Initialize the Notion client adapter with an already-initialized client."""
        self.client = client

    def _omit_null_parameters(self, **kwargs: Any) -> dict[str, Any]:
        """Omit parameters that are None."""
        return {k: v for k, v in kwargs.items() if v is not None}

    @classmethod
    async def create(cls, notion_token: str, timeout: float = DEFAULT_REQUEST_TIMEOUT, debug: bool = False) -> Self:
        """Create a new Notion client adapter.

        Args:
            notion_token: Notion integration token
            timeout: Per-request timeout in seconds
            debug: Whether the underlying client logs requests at debug level

        Returns:
            Configured NotionAdapter instance
        """
        logger.info("Creating client for Notion", timeout=timeout)
        client = await get_notion_client(notion_token=notion_token, timeout=timeout, debug=debug)
        return cls(client)

    # Database queries
    @handle_notion_validation_error
    @retry_on_rate_limit()
    async def query_database(
        self,
        database_id: str,
        start_cursor: str | None = None,
        filter: dict[str, Any] | None = None,
        page_size: int | None = None,
    ) -> dict[str, Any]:
        """Query one page of results from a database."""
        params = self._omit_null_parameters(start_cursor=start_cursor, filter=filter, page_size=page_size)
        return await self.client.databases.query(database_id=database_id, **params)

    # Page CRUD
    @handle_notion_validation_error
    @retry_on_rate_limit()
    async def create_page(self, database_id: str, properties: dict[str, Any], children: list[dict[str, Any]] | None = None) -> dict[str, Any]:
        """Create a page in a database."""
        params = self._omit_null_parameters(children=children)
        return await self.client.pages.create(parent={"database_id": database_id}, properties=properties, **params)

    @handle_notion_validation_error
    @retry_on_rate_limit()
    async def update_page_properties(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """Update the properties of a page."""
        return await self.client.pages.update(page_id=page_id, properties=properties)

    # Block CRUD
    @retry_on_rate_limit()
    async def _list_block_children_page(self, block_id: str, start_cursor: str | None) -> dict[str, Any]:
        params = self._omit_null_parameters(start_cursor=start_cursor)
        return await self.client.blocks.children.list(block_id=block_id, page_size=NOTION_MAX_PAGE_SIZE, **params)

    async def list_block_children(self, block_id: str) -> list[dict[str, Any]]:
        """List every child block of a block or page, handling pagination."""
        blocks: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            response = await self._list_block_children_page(block_id, cursor)
            blocks.extend(response["results"])
            cursor = response.get("next_cursor")
            if not cursor:
                break
        return blocks

    @handle_notion_validation_error
    @retry_on_rate_limit()
    async def update_block(self, block_id: str, block: dict[str, Any]) -> dict[str, Any]:
        """Replace the content of a block with the content of another block of the same type."""
        block_type = block["type"]
        return await self.client.blocks.update(block_id=block_id, **{block_type: block[block_type]})

    @handle_notion_validation_error
    @retry_on_rate_limit()
    async def append_block_children(self, block_id: str, children: list[dict[str, Any]]) -> dict[str, Any]:
        """Append blocks to the end of a block or page."""
        return await self.client.blocks.children.append(block_id=block_id, children=children)

    @retry_on_rate_limit()
    async def delete_block(self, block_id: str) -> dict[str, Any]:
        """Delete (archive) a block."""
        return await self.client.blocks.delete(block_id=block_id)

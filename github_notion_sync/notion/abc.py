"""Base ABC for Notion clients."""

from abc import ABC, abstractmethod
from typing import Any


class NotionClientBase(ABC):
    """Base ABC for Notion clients."""

    # Database queries
    @abstractmethod
    async def query_database(
        self,
        database_id: str,
        start_cursor: str | None = None,
        filter: dict[str, Any] | None = None,
        page_size: int | None = None,
    ) -> dict[str, Any]:
        """Query one page of results from a database."""
        pass

    # Page CRUD
    @abstractmethod
    async def create_page(self, database_id: str, properties: dict[str, Any], children: list[dict[str, Any]] | None = None) -> dict[str, Any]:
        """Create a page in a database."""
        pass

    @abstractmethod
    async def update_page_properties(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """Update the properties of a page."""
        pass

    # Block CRUD
    @abstractmethod
    async def list_block_children(self, block_id: str) -> list[dict[str, Any]]:
        """List every child block of a block or page."""
        pass

    @abstractmethod
    async def update_block(self, block_id: str, block: dict[str, Any]) -> dict[str, Any]:
        """Replace the content of a block."""
        pass

    @abstractmethod
    async def append_block_children(self, block_id: str, children: list[dict[str, Any]]) -> dict[str, Any]:
        """Append blocks to the end of a block or page."""
        pass

    @abstractmethod
    async def delete_block(self, block_id: str) -> dict[str, Any]:
        """Delete (archive) a block."""
        pass

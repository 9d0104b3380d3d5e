"""Contains unit tests for handling opened and edited issue events."""

from typing import Any, Callable
from unittest.mock import AsyncMock, call

import pytest

from github_notion_sync.notion.adapter import NotionAdapter
from github_notion_sync.schemas.issue import SourceIssue
from github_notion_sync.synchronize.events import handle_issue_edited, handle_issue_opened


def persisted_block(block_id: str) -> dict[str, Any]:
    """Build a persisted paragraph block."""
    return {"object": "block", "id": block_id, "type": "paragraph", "paragraph": {"rich_text": []}}


def notion_adapter_with_page(page: dict[str, Any] | None, blocks: list[dict[str, Any]] | None = None) -> AsyncMock:
    """Build a Notion adapter whose ID query finds the given page."""
    adapter = AsyncMock(spec=NotionAdapter)
    adapter.query_database.return_value = {"results": [page] if page else [], "next_cursor": None}
    adapter.create_page.return_value = {"id": "created-page"}
    adapter.list_block_children.return_value = blocks or []
    return adapter


@pytest.mark.asyncio
async def test_handle_issue_opened(make_issue: Callable[..., SourceIssue]) -> None:
    """Test that an opened issue creates one page with properties and a body block."""
    adapter = notion_adapter_with_page(None)
    issue = make_issue(number=4, body="Hello")

    page = await handle_issue_opened(issue, adapter, "db-id")

    assert page == {"id": "created-page"}
    adapter.create_page.assert_awaited_once()
    kwargs = adapter.create_page.await_args.kwargs
    assert kwargs["database_id"] == "db-id"
    assert kwargs["properties"]["Name"]["title"][0]["text"]["content"] == "Issue 4"
    assert kwargs["properties"]["Reviewer"] == {"multi_select": []}
    assert len(kwargs["children"]) == 1
    assert kwargs["children"][0]["paragraph"]["rich_text"][0]["text"]["content"] == "Hello"


@pytest.mark.asyncio
async def test_handle_issue_edited_queries_by_global_id(make_issue: Callable[..., SourceIssue]) -> None:
    """Test that the page is looked up by the issue's immutable global ID."""
    adapter = notion_adapter_with_page({"id": "page-1"}, [persisted_block("block0")])
    issue = make_issue(number=4, id=123456)

    await handle_issue_edited(issue, adapter, "db-id")

    adapter.query_database.assert_awaited_once_with(
        database_id="db-id",
        filter={"property": "ID", "number": {"equals": 123456}},
        page_size=1,
    )


@pytest.mark.asyncio
async def test_handle_issue_edited_shrinks_blocks(make_issue: Callable[..., SourceIssue]) -> None:
    """Test that an edit updates the first block and deletes the surplus one."""
    adapter = notion_adapter_with_page({"id": "page-1"}, [persisted_block("block0"), persisted_block("block1")])
    issue = make_issue(body="New body")

    page = await handle_issue_edited(issue, adapter, "db-id")

    assert page == {"id": "page-1"}
    adapter.update_page_properties.assert_awaited_once()
    assert adapter.update_page_properties.await_args.kwargs["page_id"] == "page-1"
    adapter.list_block_children.assert_awaited_once_with(block_id="page-1")
    adapter.update_block.assert_awaited_once()
    update_kwargs = adapter.update_block.await_args.kwargs
    assert update_kwargs["block_id"] == "block0"
    assert update_kwargs["block"]["paragraph"]["rich_text"][0]["text"]["content"] == "New body"
    adapter.append_block_children.assert_not_awaited()
    assert adapter.delete_block.await_args_list == [call(block_id="block1")]
    adapter.create_page.assert_not_awaited()


@pytest.mark.asyncio
async def test_handle_issue_edited_appends_to_empty_page(make_issue: Callable[..., SourceIssue]) -> None:
    """Test that a page without blocks gets the body block appended."""
    adapter = notion_adapter_with_page({"id": "page-1"}, [])

    await handle_issue_edited(make_issue(body="Body"), adapter, "db-id")

    adapter.update_block.assert_not_awaited()
    adapter.delete_block.assert_not_awaited()
    adapter.append_block_children.assert_awaited_once()
    kwargs = adapter.append_block_children.await_args.kwargs
    assert kwargs["block_id"] == "page-1"
    assert len(kwargs["children"]) == 1


@pytest.mark.asyncio
async def test_handle_issue_edited_creates_missing_page(make_issue: Callable[..., SourceIssue]) -> None:
    """Test that an edit of an issue without a page creates the page instead."""
    adapter = notion_adapter_with_page(None)

    page = await handle_issue_edited(make_issue(), adapter, "db-id")

    assert page == {"id": "created-page"}
    adapter.create_page.assert_awaited_once()
    adapter.update_page_properties.assert_not_awaited()
    adapter.list_block_children.assert_not_awaited()


@pytest.mark.asyncio
async def test_handle_issue_edited_deletes_all_surplus_blocks_before_raising(make_issue: Callable[..., SourceIssue]) -> None:
    """Test that a failed block deletion does not stop the other deletions."""
    blocks = [persisted_block(f"block{index}") for index in range(4)]
    adapter = notion_adapter_with_page({"id": "page-1"}, blocks)
    adapter.delete_block.side_effect = [RuntimeError("archived"), {}, {}]

    with pytest.raises(RuntimeError, match="archived"):
        await handle_issue_edited(make_issue(), adapter, "db-id")

    assert adapter.delete_block.await_count == 3

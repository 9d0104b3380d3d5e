"""Handles single-issue webhook events by creating or updating the issue's page."""

from typing import Any, Awaitable, Iterable

import structlog

from github_notion_sync.notion.abc import NotionClientBase
from github_notion_sync.schemas.issue import SourceIssue
from github_notion_sync.synchronize.blocks import BlockReconciliationPlan, get_body_children_blocks, reconcile_blocks
from github_notion_sync.synchronize.properties import parse_properties_from_issue
from github_notion_sync.utils.concurrency import DEFAULT_MAX_CONCURRENCY, first_error, gather_settled
from github_notion_sync.utils.constants import ID_PROPERTY

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def _settle_or_raise(awaitables: Iterable[Awaitable[Any]], max_concurrency: int) -> None:
    """Run every awaitable to completion, then raise the first error if any failed."""
    error = first_error(await gather_settled(awaitables, max_concurrency=max_concurrency))
    if error is not None:
        raise error


async def handle_issue_opened(
    issue: SourceIssue, notion_adapter: NotionClientBase, database_id: str, log: structlog.stdlib.BoundLogger | None = None
) -> dict[str, Any]:
    """Create the page of a newly opened issue."""
    log = log if log is not None else logger
    log.info("Creating page for issue", issue_number=issue.number)
    page = await notion_adapter.create_page(
        database_id=database_id,
        properties=parse_properties_from_issue(issue, log=log),
        children=get_body_children_blocks(issue.body, log=log),
    )
    log.info("Created page for issue", issue_number=issue.number, page_id=page["id"])
    return page


async def find_page_for_issue(
    issue: SourceIssue, notion_adapter: NotionClientBase, database_id: str, log: structlog.stdlib.BoundLogger | None = None
) -> dict[str, Any] | None:
    """Find the page whose ID property holds the issue's global ID.

    GitHub issue IDs are unique, so at most one match is expected; the first result is used.
    """
    log = log if log is not None else logger
    log.info("Querying database for page with GitHub ID", issue_id=issue.id)
    response = await notion_adapter.query_database(
        database_id=database_id,
        filter={"property": ID_PROPERTY, "number": {"equals": issue.id}},
        page_size=1,
    )
    results = response["results"]
    return results[0] if results else None


async def apply_block_plan(
    page_id: str, plan: BlockReconciliationPlan, notion_adapter: NotionClientBase, max_concurrency: int = DEFAULT_MAX_CONCURRENCY
) -> None:
    """Carry out a block reconciliation plan against a page."""
    await _settle_or_raise(
        (notion_adapter.update_block(block_id=block_id, block=block) for block_id, block in plan.to_update),
        max_concurrency,
    )
    if plan.to_append:
        await notion_adapter.append_block_children(block_id=page_id, children=plan.to_append)
    await _settle_or_raise((notion_adapter.delete_block(block_id=block_id) for block_id in plan.to_delete), max_concurrency)


async def handle_issue_edited(
    issue: SourceIssue,
    notion_adapter: NotionClientBase,
    database_id: str,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    log: structlog.stdlib.BoundLogger | None = None,
) -> dict[str, Any]:
    """Update the page of an edited issue, or create it if the page cannot be found."""
    log = log if log is not None else logger
    page = await find_page_for_issue(issue, notion_adapter, database_id, log=log)
    if page is None:
        log.warning("Could not find page with GitHub ID, creating a new one", issue_id=issue.id, issue_number=issue.number)
        return await handle_issue_opened(issue, notion_adapter, database_id, log=log)

    page_id = page["id"]
    log.info("Updating page for issue", issue_number=issue.number, page_id=page_id)
    await notion_adapter.update_page_properties(page_id=page_id, properties=parse_properties_from_issue(issue, log=log))

    existing_blocks = await notion_adapter.list_block_children(block_id=page_id)
    plan = reconcile_blocks(get_body_children_blocks(issue.body, log=log), existing_blocks)
    log.debug(
        "Reconciling page blocks",
        page_id=page_id,
        update_count=len(plan.to_update),
        append_count=len(plan.to_append),
        delete_count=len(plan.to_delete),
    )
    await apply_block_plan(page_id, plan, notion_adapter, max_concurrency=max_concurrency)
    log.info("Updated page for issue", issue_number=issue.number, page_id=page_id)
    return page

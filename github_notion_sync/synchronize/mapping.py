"""Builds the index of GitHub issue numbers already present in the Notion database."""

from typing import Any

import structlog

from github_notion_sync.notion.abc import NotionClientBase
from github_notion_sync.utils.constants import NUMBER_PROPERTY

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def get_all_database_pages(
    notion_adapter: NotionClientBase, database_id: str, log: structlog.stdlib.BoundLogger | None = None
) -> list[dict[str, Any]]:
    """Fetch every page of a database by following ``next_cursor`` until it is null."""
    log = log if log is not None else logger
    pages: list[dict[str, Any]] = []
    cursor: str | None = None
    while True:
        response = await notion_adapter.query_database(database_id=database_id, start_cursor=cursor)
        pages.extend(response["results"])
        log.debug("Fetched page of Notion database results", database_id=database_id, result_count=len(response["results"]))
        cursor = response.get("next_cursor")
        if not cursor:
            break
    return pages


def get_issue_number(page: dict[str, Any]) -> int | None:
    """Return the issue number stored on a page, or None if the page is not backed by an issue."""
    prop = (page.get("properties") or {}).get(NUMBER_PROPERTY)
    if not isinstance(prop, dict):
        return None
    value = prop.get("number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value)


async def build_issue_mapping(notion_adapter: NotionClientBase, database_id: str, log: structlog.stdlib.BoundLogger | None = None) -> dict[int, str]:
    """Map each GitHub issue number in the database to the ID of its page.

    Every page is fetched before the mapping is built. Any fetch error aborts the build,
    since a partial mapping would lead to duplicate pages being created.
    """
    log = log if log is not None else logger
    log.info("Checking for issues already in the database", database_id=database_id)
    try:
        pages = await get_all_database_pages(notion_adapter, database_id, log=log)
    except Exception as exc:
        log.error("Failed to query Notion database", database_id=database_id, error=str(exc))
        raise

    mapping: dict[int, str] = {}
    for page in pages:
        issue_number = get_issue_number(page)
        if issue_number is None:
            continue
        if issue_number in mapping:
            log.warning(
                "Multiple pages found for the same issue number, keeping the first",
                issue_number=issue_number,
                page_id=page["id"],
                kept_page_id=mapping[issue_number],
            )
            continue
        mapping[issue_number] = page["id"]

    log.info("Found issues already in Notion database", database_id=database_id, page_count=len(pages), issue_count=len(mapping))
    return mapping

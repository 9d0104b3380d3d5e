"""Reconciles a whole GitHub repository with the Notion database."""

import asyncio
import time

import structlog

from github_notion_sync.github.abc import GitHubClientBase
from github_notion_sync.notion.abc import NotionClientBase
from github_notion_sync.schemas.issue import SourceIssue
from github_notion_sync.synchronize.exceptions import LedgerSyncError
from github_notion_sync.synchronize.mapping import build_issue_mapping
from github_notion_sync.synchronize.properties import get_properties_from_issue
from github_notion_sync.synchronize.results import SyncFailure, SyncOutcome
from github_notion_sync.utils.concurrency import DEFAULT_MAX_CONCURRENCY, first_error, gather_settled

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def fetch_source_issues(github_adapter: GitHubClientBase, log: structlog.stdlib.BoundLogger | None = None) -> list[SourceIssue]:
    """Fetch every issue of the repository, excluding pull requests."""
    log = log if log is not None else logger
    log.info("Finding GitHub issues")
    github_issues = await github_adapter.list_issues(state="all")
    issues = [issue for issue in map(SourceIssue.from_github, github_issues) if not issue.is_pull_request]
    log.info("Found GitHub issues", issue_count=len(issues), pull_request_count=len(github_issues) - len(issues))
    return issues


def find_missing_issues(mapping: dict[int, str], issues: list[SourceIssue]) -> list[SourceIssue]:
    """Return the issues whose number has no page yet, in their original order."""
    return [issue for issue in issues if issue.number not in mapping]


async def create_page_for_issue(
    issue: SourceIssue,
    github_adapter: GitHubClientBase,
    notion_adapter: NotionClientBase,
    database_id: str,
    log: structlog.stdlib.BoundLogger | None = None,
) -> str:
    """Create the page of a single issue and return its ID."""
    log = log if log is not None else logger
    log.debug("Creating page for issue", issue_number=issue.number, issue_title=issue.title)
    try:
        properties = await get_properties_from_issue(issue, github_adapter, log=log)
        page = await notion_adapter.create_page(database_id=database_id, properties=properties)
    except Exception as exc:
        log.error("Failed to create page for issue", issue_number=issue.number, issue_title=issue.title, error=str(exc))
        raise
    log.info("Created page for issue", issue_number=issue.number, page_id=page["id"])
    return page["id"]


async def create_missing_pages(
    issues: list[SourceIssue],
    github_adapter: GitHubClientBase,
    notion_adapter: NotionClientBase,
    database_id: str,
    issues_considered: int,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    log: structlog.stdlib.BoundLogger | None = None,
) -> tuple[SyncOutcome, BaseException | None]:
    """Create a page for every issue concurrently, letting every attempt run to completion.

    Returns the outcome of the pass along with the first exception raised, if any.
    """
    log = log if log is not None else logger
    log.info("Adding GitHub issues to Notion", page_count=len(issues), max_concurrency=max_concurrency)
    outcomes = await gather_settled(
        (create_page_for_issue(issue, github_adapter, notion_adapter, database_id, log=log) for issue in issues),
        max_concurrency=max_concurrency,
    )
    failures = [SyncFailure(issue.number, str(outcome.error)) for issue, outcome in zip(issues, outcomes, strict=True) if not outcome.succeeded]
    outcome = SyncOutcome(issues_considered=issues_considered, created=len(issues) - len(failures), failures=failures)
    return outcome, first_error(outcomes)


async def sync_notion_db_with_github(
    mapping: dict[int, str],
    issues: list[SourceIssue],
    github_adapter: GitHubClientBase,
    notion_adapter: NotionClientBase,
    database_id: str,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    log: structlog.stdlib.BoundLogger | None = None,
) -> SyncOutcome:
    """Create a page for every issue missing from the mapping.

    Raises:
        LedgerSyncError: After every attempt has finished, if any page could not be created.
    """
    log = log if log is not None else logger
    missing_issues = find_missing_issues(mapping, issues)
    log.info("Issues need to be added to Notion", missing_issue_count=len(missing_issues), issue_count=len(issues))
    if not missing_issues:
        log.info("No new issues to add to Notion")
        return SyncOutcome(issues_considered=len(issues), created=0)

    outcome, error = await create_missing_pages(
        missing_issues,
        github_adapter,
        notion_adapter,
        database_id,
        issues_considered=len(issues),
        max_concurrency=max_concurrency,
        log=log,
    )
    if not outcome.succeeded:
        log.error(
            "Pages failed to create",
            failed_count=len(outcome.failures),
            attempted_count=len(missing_issues),
            created_count=outcome.created,
            failed_issue_numbers=[failure.issue_number for failure in outcome.failures],
        )
        raise LedgerSyncError(outcome, error)
    log.info("Created pages in Notion", created_count=outcome.created)
    return outcome


async def fetch_mapping_and_issues(
    github_adapter: GitHubClientBase,
    notion_adapter: NotionClientBase,
    database_id: str,
    log: structlog.stdlib.BoundLogger | None = None,
) -> tuple[dict[int, str], list[SourceIssue]]:
    """Build the database index and list the repository's issues concurrently.

    If either side fails, the other is cancelled and the first failure is raised.
    """
    log = log if log is not None else logger
    try:
        async with asyncio.TaskGroup() as task_group:
            mapping_task = task_group.create_task(build_issue_mapping(notion_adapter, database_id, log=log))
            issues_task = task_group.create_task(fetch_source_issues(github_adapter, log=log))
    except ExceptionGroup as group:
        raise group.exceptions[0]
    return mapping_task.result(), issues_task.result()


async def reconcile_repository(
    github_adapter: GitHubClientBase,
    notion_adapter: NotionClientBase,
    database_id: str,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    log: structlog.stdlib.BoundLogger | None = None,
) -> SyncOutcome:
    """Run a full reconciliation pass: index the database, list the repository and create missing pages.

    The database index and the repository listing are fetched concurrently; a failure in
    either aborts the pass before any page is created.
    """
    log = log if log is not None else logger
    start_time = time.time()
    log.info("Starting sync for repository", start_time=start_time)
    try:
        mapping, issues = await fetch_mapping_and_issues(github_adapter, notion_adapter, database_id, log=log)
        outcome = await sync_notion_db_with_github(
            mapping, issues, github_adapter, notion_adapter, database_id, max_concurrency=max_concurrency, log=log
        )
    except Exception as exc:
        log.error("Sync failed", error=str(exc), duration=round(time.time() - start_time, 2))
        raise
    log.info("Sync completed successfully", created_count=outcome.created, duration=round(time.time() - start_time, 2))
    return outcome

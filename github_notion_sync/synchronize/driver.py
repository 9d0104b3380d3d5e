"""Orchestrates the synchronization of GitHub issues into Notion."""

import time
from typing import Any

import structlog

from github_notion_sync.configuration.models import SyncConfig
from github_notion_sync.github.adapter import GitHubKitAdapter
from github_notion_sync.notion.adapter import NotionAdapter
from github_notion_sync.schemas.issue import SourceIssue
from github_notion_sync.synchronize.events import handle_issue_edited, handle_issue_opened
from github_notion_sync.synchronize.reconciliation import reconcile_repository
from github_notion_sync.synchronize.results import SyncOutcome
from github_notion_sync.utils.constants import ISSUE_OPENED_ACTION, WORKFLOW_DISPATCH_EVENT

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


async def run_reconciliation_workflow(config: SyncConfig, repo: str) -> SyncOutcome:
    """Run the reconciliation workflow: create a page for every issue of the repository missing from Notion."""
    log = logger.bind(repo=repo, database_id=config.notion_database_id)
    log.info("Using Notion database")
    github_adapter = await GitHubKitAdapter.create(
        repo=repo,
        github_token=config.github_token,
        github_api_url=config.github_api_url,
        timeout=config.request_timeout,
    )
    notion_adapter = await NotionAdapter.create(notion_token=config.notion_token, timeout=config.request_timeout, debug=config.debug)
    return await reconcile_repository(
        github_adapter,
        notion_adapter,
        config.notion_database_id,
        max_concurrency=config.max_concurrency,
        log=log,
    )


async def run_event_workflow(config: SyncConfig, event_name: str, payload: dict[str, Any]) -> SyncOutcome | None:
    """Run the workflow selected by a GitHub event.

    An ``opened`` issue creates a page, ``workflow_dispatch`` reconciles the whole
    repository and any other issue event updates the issue's page.
    """
    log = logger.bind(event_name=event_name, action=payload.get("action"), database_id=config.notion_database_id)
    start_time = time.time()
    log.info("Starting", start_time=start_time)

    outcome: SyncOutcome | None = None
    if payload.get("action") == ISSUE_OPENED_ACTION:
        notion_adapter = await NotionAdapter.create(notion_token=config.notion_token, timeout=config.request_timeout, debug=config.debug)
        await handle_issue_opened(SourceIssue.from_payload(payload["issue"]), notion_adapter, config.notion_database_id, log=log)
    elif event_name == WORKFLOW_DISPATCH_EVENT:
        repo = (payload.get("repository") or {}).get("full_name")
        if not repo:
            log.error("Unable to find repository name in GitHub event payload")
            raise ValueError("Unable to find repository name in GitHub event payload")
        try:
            outcome = await run_reconciliation_workflow(config, repo)
        except Exception as exc:
            log.error("Workflow dispatch sync failed", repo=repo, error=str(exc))
            raise
    else:
        if "issue" not in payload:
            raise ValueError(f"GitHub event {event_name!r} does not carry an issue")
        notion_adapter = await NotionAdapter.create(notion_token=config.notion_token, timeout=config.request_timeout, debug=config.debug)
        await handle_issue_edited(
            SourceIssue.from_payload(payload["issue"]),
            notion_adapter,
            config.notion_database_id,
            max_concurrency=config.max_concurrency,
            log=log,
        )

    log.info("Complete!", duration=round(time.time() - start_time, 2))
    return outcome

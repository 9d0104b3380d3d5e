"""Maps GitHub issue fields onto the properties of the Notion database."""

from datetime import datetime
from typing import Any, TypeAlias

import structlog

from github_notion_sync.github.abc import GitHubClientBase
from github_notion_sync.schemas.issue import ProjectLinkage, SourceIssue
from github_notion_sync.synchronize.rich_text import parse_body_rich_text, text_span
from github_notion_sync.utils.constants import ID_PROPERTY, NOTION_MAX_TEXT_LENGTH, NUMBER_PROPERTY, STATUS_CLOSED, STATUS_OPEN
from github_notion_sync.utils.github import split_repository_url

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

PropertyValue: TypeAlias = dict[str, Any]
PropertyValueMap: TypeAlias = dict[str, PropertyValue]


# Property value builders. Each returns the Notion wire shape of one property type.
def title(content: str) -> PropertyValue:
    """Build a ``title`` property value."""
    return {"title": [text_span(content[:NOTION_MAX_TEXT_LENGTH])]}


def text(content: str | None) -> PropertyValue:
    """Build a plain ``rich_text`` property value holding a single unformatted string."""
    if not content:
        return {"rich_text": []}
    return {"rich_text": [text_span(content[:NOTION_MAX_TEXT_LENGTH])]}


def rich_text(spans: list[dict[str, Any]]) -> PropertyValue:
    """Build a ``rich_text`` property value from pre-built rich text spans."""
    return {"rich_text": spans}


def number(value: int | float) -> PropertyValue:
    """Build a ``number`` property value."""
    return {"number": value}


def url(value: str) -> PropertyValue:
    """Build a ``url`` property value."""
    return {"url": value}


def date(value: datetime | str) -> PropertyValue:
    """Build a ``date`` property value starting at the given timestamp."""
    start = value.isoformat() if isinstance(value, datetime) else value
    return {"date": {"start": start}}


def select(name: str) -> PropertyValue:
    """Build a ``select`` property value."""
    return {"select": {"name": name}}


def multi_select(names: list[str]) -> PropertyValue:
    """Build a ``multi_select`` property value."""
    return {"multi_select": [{"name": name} for name in names]}


def get_status_select_option(state: str) -> PropertyValue:
    """Map a GitHub issue state onto the Status select option."""
    if state == "open":
        return select(STATUS_OPEN)
    if state == "closed":
        return select(STATUS_CLOSED)
    raise ValueError(f"Unknown GitHub issue state: {state!r}")


def parse_properties_from_issue(issue: SourceIssue, log: structlog.stdlib.BoundLogger | None = None) -> PropertyValueMap:
    """Build the properties written for a single opened or edited issue."""
    return {
        "Name": title(issue.title),
        "Status": get_status_select_option(issue.state),
        "Body": rich_text(parse_body_rich_text(issue.body, log=log)),
        "Assignees": multi_select(issue.assignees),
        "Reviewer": multi_select([]),
        "Link": url(issue.html_url),
    }


async def get_project_linkage(issue: SourceIssue, github_adapter: GitHubClientBase, log: structlog.stdlib.BoundLogger | None = None) -> ProjectLinkage:
    """Look up the project linkage of an issue, degrading to empty fields if the lookup fails."""
    log = log if log is not None else logger
    try:
        linkage = await github_adapter.get_issue_project_linkage(issue.number)
    except Exception as exc:
        log.warning(
            "Failed to look up project linkage, leaving project fields empty",
            issue_number=issue.number,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return ProjectLinkage()
    return linkage if linkage is not None else ProjectLinkage()


async def get_properties_from_issue(
    issue: SourceIssue, github_adapter: GitHubClientBase, log: structlog.stdlib.BoundLogger | None = None
) -> PropertyValueMap:
    """Build the full set of properties written when reconciling a whole repository.

    These properties are specific to the template database the action is designed for.
    """
    log = log if log is not None else logger
    try:
        organization, repository = split_repository_url(issue.repository_url)
        project = await get_project_linkage(issue, github_adapter, log=log)
        return {
            "Name": title(issue.title),
            "Status": get_status_select_option(issue.state),
            "Organization": text(organization),
            "Repository": text(repository),
            "Body": rich_text(parse_body_rich_text(issue.body, log=log)),
            NUMBER_PROPERTY: number(issue.number),
            "Assignees": multi_select(issue.assignees),
            "Milestone": text(issue.milestone or ""),
            "Labels": multi_select(issue.labels),
            "Author": text(issue.author or ""),
            "Created": date(issue.created_at),
            "Updated": date(issue.updated_at),
            ID_PROPERTY: number(issue.id),
            "Link": url(issue.html_url),
            "Project": text(project.name),
            "Project Column": text(project.column),
        }
    except Exception as exc:
        log.error("Failed to extract properties from issue", issue_number=issue.number, error=str(exc))
        raise

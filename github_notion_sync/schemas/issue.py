"""Pydantic schemas for GitHub issue snapshots consumed by the synchronization engine."""

from datetime import datetime
from typing import Any, Literal

from githubkit.versions.latest.models import Issue
from pydantic import BaseModel, ConfigDict, field_validator


class ProjectLinkage(BaseModel):
    """Pydantic model for the GitHub project an issue belongs to and its column (status) there."""

    name: str = ""
    column: str = ""


class SourceIssue(BaseModel):
    """Pydantic model for an immutable snapshot of a GitHub issue."""

    model_config = ConfigDict(frozen=True)

    number: int
    id: int
    title: str
    body: str = ""
    state: Literal["open", "closed"]
    assignees: list[str] = []
    labels: list[str] = []
    author: str | None = None
    milestone: str | None = None
    created_at: datetime
    updated_at: datetime
    html_url: str
    repository_url: str
    is_pull_request: bool = False

    @field_validator("body", mode="before")
    @classmethod
    def _none_body_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_payload(cls, issue: dict[str, Any]) -> "SourceIssue":
        """Build a snapshot from the ``issue`` object of a webhook payload or REST response."""
        milestone = issue.get("milestone") or {}
        user = issue.get("user") or {}
        return cls(
            number=issue["number"],
            id=issue["id"],
            title=issue["title"],
            body=issue.get("body"),
            state=issue["state"],
            assignees=[assignee["login"] for assignee in issue.get("assignees") or []],
            labels=[label if isinstance(label, str) else label["name"] for label in issue.get("labels") or []],
            author=user.get("login"),
            milestone=milestone.get("title"),
            created_at=issue["created_at"],
            updated_at=issue["updated_at"],
            html_url=issue["html_url"],
            repository_url=issue["repository_url"],
            is_pull_request=bool(issue.get("pull_request")),
        )

    @classmethod
    def from_github(cls, issue: Issue) -> "SourceIssue":
        """Build a snapshot from a githubkit ``Issue`` model.

        Optional fields that githubkit leaves unset are falsy, so they collapse to the defaults.
        """
        return cls(
            number=issue.number,
            id=issue.id,
            title=issue.title,
            body=issue.body or "",
            state=issue.state,
            assignees=[assignee.login for assignee in issue.assignees or []],
            labels=[label if isinstance(label, str) else label.name for label in issue.labels if isinstance(label, str) or label.name],
            author=issue.user.login if issue.user else None,
            milestone=issue.milestone.title if issue.milestone else None,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
            html_url=issue.html_url,
            repository_url=issue.repository_url,
            is_pull_request=bool(issue.pull_request),
        )

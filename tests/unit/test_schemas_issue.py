"""Unit tests for the issue snapshot schemas."""

from datetime import datetime, timezone
from typing import Any

import pytest
from pydantic import ValidationError

from github_notion_sync.schemas.issue import SourceIssue


def issue_payload(**overrides: Any) -> dict[str, Any]:
    """Return the issue object of a webhook payload."""
    payload: dict[str, Any] = {
        "number": 12,
        "id": 987654,
        "title": "Crash on startup",
        "body": "It crashes",
        "state": "open",
        "assignees": [{"login": "alice"}, {"login": "bob"}],
        "labels": [{"name": "bug"}, {"name": "p1"}],
        "user": {"login": "octocat"},
        "milestone": {"title": "v2.0"},
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-02T11:30:00Z",
        "html_url": "https://github.com/octo-org/octo-repo/issues/12",
        "repository_url": "https://api.github.com/repos/octo-org/octo-repo",
    }
    payload.update(overrides)
    return payload


def test_from_payload() -> None:
    """Test building a snapshot from a webhook payload."""
    issue = SourceIssue.from_payload(issue_payload())

    assert issue.number == 12
    assert issue.id == 987654
    assert issue.assignees == ["alice", "bob"]
    assert issue.labels == ["bug", "p1"]
    assert issue.author == "octocat"
    assert issue.milestone == "v2.0"
    assert issue.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert issue.is_pull_request is False


def test_from_payload_with_missing_optional_fields() -> None:
    """Test that null body, milestone and author collapse to their defaults."""
    issue = SourceIssue.from_payload(issue_payload(body=None, milestone=None, user=None, assignees=[], labels=["wontfix"]))

    assert issue.body == ""
    assert issue.milestone is None
    assert issue.author is None
    assert issue.assignees == []
    assert issue.labels == ["wontfix"]


def test_from_payload_detects_pull_requests() -> None:
    """Test that issues carrying a pull_request object are flagged."""
    issue = SourceIssue.from_payload(issue_payload(pull_request={"url": "https://api.github.com/repos/octo-org/octo-repo/pulls/12"}))

    assert issue.is_pull_request is True


def test_snapshot_is_immutable() -> None:
    """Test that snapshots cannot be modified."""
    issue = SourceIssue.from_payload(issue_payload())

    with pytest.raises(ValidationError):
        issue.title = "Changed"  # type: ignore[misc]


def test_state_must_be_open_or_closed() -> None:
    """Test that unknown issue states are rejected."""
    with pytest.raises(ValidationError):
        SourceIssue.from_payload(issue_payload(state="merged"))

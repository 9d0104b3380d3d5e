"""Unit tests for the GitHubKitAdapter class and related GitHub operations."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from github_notion_sync.github.adapter import GitHubKitAdapter
from github_notion_sync.schemas.issue import ProjectLinkage


class DummyResponse:
    """A dummy response object to mock GitHub API responses."""

    def __init__(self, parsed_data: Any) -> None:
        """Initialize the dummy response with its parsed data."""
        self.status_code: int = 200
        self.parsed_data = parsed_data


@pytest.mark.asyncio
async def test_list_issues_paginates_until_short_page() -> None:
    """Test that list_issues keeps requesting pages until a page is not full."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(
        side_effect=[DummyResponse(["i1", "i2"]), DummyResponse(["i3", "i4"]), DummyResponse(["i5"])]
    )

    issues = await adapter.list_issues(state="all", per_page=2)

    assert issues == ["i1", "i2", "i3", "i4", "i5"]
    pages = [c.kwargs["page"] for c in adapter.client.rest.issues.async_list_for_repo.await_args_list]
    assert pages == [1, 2, 3]
    first_call = adapter.client.rest.issues.async_list_for_repo.await_args_list[0].kwargs
    assert first_call["owner"] == "owner"
    assert first_call["repo"] == "repo"
    assert first_call["state"] == "all"


@pytest.mark.asyncio
async def test_list_issues_stops_on_empty_page() -> None:
    """Test that list_issues stops when a page comes back empty."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(side_effect=[DummyResponse(["i1", "i2"]), DummyResponse([])])

    assert await adapter.list_issues(per_page=2) == ["i1", "i2"]
    assert adapter.client.rest.issues.async_list_for_repo.await_count == 2


@pytest.mark.asyncio
async def test_list_issues_propagates_errors() -> None:
    """Test that a failing page aborts the listing."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.rest.issues.async_list_for_repo = AsyncMock(side_effect=Exception("Server error"))

    with pytest.raises(Exception, match="Server error"):  # noqa: B017
        await adapter.list_issues()


@pytest.mark.asyncio
async def test_get_issue_project_linkage() -> None:
    """Test reading the project title and Status column of an issue."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.async_graphql = AsyncMock(
        return_value={
            "repository": {
                "issue": {
                    "projectItems": {
                        "nodes": [{"project": {"title": "Roadmap"}, "fieldValueByName": {"name": "In review"}}],
                    }
                }
            }
        }
    )

    linkage = await adapter.get_issue_project_linkage(42)

    assert linkage == ProjectLinkage(name="Roadmap", column="In review")
    variables = adapter.client.async_graphql.await_args.kwargs["variables"]
    assert variables == {"owner": "owner", "repo": "repo", "number": 42}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "data",
    [
        pytest.param({"repository": {"issue": {"projectItems": {"nodes": []}}}}, id="no project items"),
        pytest.param({"repository": {"issue": None}}, id="issue not found"),
        pytest.param({"repository": None}, id="repository not found"),
    ],
)
async def test_get_issue_project_linkage_without_project(data: dict[str, Any]) -> None:
    """Test that an issue outside any project has no linkage."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.async_graphql = AsyncMock(return_value=data)

    assert await adapter.get_issue_project_linkage(42) is None


@pytest.mark.asyncio
async def test_get_issue_project_linkage_without_status_field() -> None:
    """Test that a project without a Status value yields an empty column."""
    adapter = GitHubKitAdapter(MagicMock(), "owner", "repo")
    adapter.client.async_graphql = AsyncMock(
        return_value={"repository": {"issue": {"projectItems": {"nodes": [{"project": {"title": "Roadmap"}, "fieldValueByName": None}]}}}}
    )

    assert await adapter.get_issue_project_linkage(1) == ProjectLinkage(name="Roadmap", column="")


@pytest.mark.asyncio
async def test_create_rejects_malformed_repository() -> None:
    """Test that the adapter cannot be created for a malformed repository."""
    with pytest.raises(ValueError):
        await GitHubKitAdapter.create(repo="not-a-repo", github_token="token")

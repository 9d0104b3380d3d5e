"""Base ABC for GitHub clients."""

from abc import ABC, abstractmethod
from typing import Any, Literal

from github_notion_sync.schemas.issue import ProjectLinkage


class GitHubClientBase(ABC):
    """Base ABC for GitHub clients."""

    @abstractmethod
    async def list_issues(self, state: Literal["open", "closed", "all"] = "all", **kwargs: Any) -> list[Any]:
        """List issues (including pull requests) for a repository."""
        pass

    @abstractmethod
    async def get_issue_project_linkage(self, issue_number: int) -> ProjectLinkage | None:
        """Get the project and column an issue is linked to, if any."""
        pass

"""GitHub client adapter for the githubkit library."""

from typing import Any, Literal, Self

import structlog
from githubkit import Response
from githubkit.versions.latest.models import Issue

from github_notion_sync.schemas.issue import ProjectLinkage
from github_notion_sync.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_REQUEST_TIMEOUT, GITHUB_ISSUES_PER_PAGE
from github_notion_sync.utils.github import split_repository_in_configuration
from github_notion_sync.utils.retry import retry_on_rate_limit

from .abc import GitHubClientBase
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

ISSUE_PROJECT_LINKAGE_QUERY = """
query($owner: String!, $repo: String!, $number: Int!) {
  repository(owner: $owner, name: $repo) {
    issue(number: $number) {
      projectItems(first: 1) {
        nodes {
          project {
            title
          }
          fieldValueByName(name: "Status") {
            ... on ProjectV2ItemFieldSingleSelectValue {
              name
            }
          }
        }
      }
    }
  }
}
"""


class GitHubKitAdapter(GitHubClientBase):
    """GitHub client adapter for the githubkit library."""

    def __init__(self, client: GitHubClient, owner: str, repo_name: str) -> None:
        """Initialize the GitHub client adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name

    @property
    def repo(self) -> str:
        """The repository in 'owner/repo' format."""
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    async def create(
        cls,
        repo: str,
        github_token: str,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> Self:
        """Create a new GitHub client adapter.

        Args:
            repo: Repository in 'owner/repo' format
            github_token: Token used to authenticate against the GitHub API
            github_api_url: GitHub API URL (defaults to https://api.github.com)
            timeout: Per-request timeout in seconds

        Returns:
            Configured GitHubKitAdapter instance

        Raises:
            ValueError: If the repository is not in 'owner/repo' format
        """
        owner, repo_name = await split_repository_in_configuration(repo=repo)
        logger.info(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(github_token=github_token, github_api_url=github_api_url, timeout=timeout)
        return cls(client, owner, repo_name)

    @retry_on_rate_limit()
    async def _list_issues_page(self, state: str, per_page: int, page: int, **kwargs: Any) -> list[Issue]:
        response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
            owner=self.owner,
            repo=self.repo_name,
            state=state,
            per_page=per_page,
            page=page,
            **kwargs,
        )
        return response.parsed_data

    async def list_issues(self, state: Literal["open", "closed", "all"] = "all", per_page: int = GITHUB_ISSUES_PER_PAGE, **kwargs: Any) -> list[Issue]:
        """List all issues for a repository, handling pagination.

        GitHub's issue listing includes pull requests; callers filter them out.
        """
        all_issues: list[Issue] = []
        page: int = 1
        while True:
            issues = await self._list_issues_page(state, per_page, page, **kwargs)
            if not issues:
                break
            all_issues.extend(issues)
            logger.debug("Fetched page of GitHub issues", repo=self.repo, page=page, issue_count=len(issues))
            if len(issues) < per_page:
                break
            page += 1
        return all_issues

    @retry_on_rate_limit()
    async def get_issue_project_linkage(self, issue_number: int) -> ProjectLinkage | None:
        """Get the first GitHub project an issue belongs to and its Status column, if any."""
        data: dict[str, Any] = await self.client.async_graphql(
            ISSUE_PROJECT_LINKAGE_QUERY,
            variables={"owner": self.owner, "repo": self.repo_name, "number": issue_number},
        )
        issue = (data.get("repository") or {}).get("issue") or {}
        nodes = (issue.get("projectItems") or {}).get("nodes") or []
        if not nodes:
            return None
        item = nodes[0] or {}
        project = item.get("project") or {}
        column = item.get("fieldValueByName") or {}
        return ProjectLinkage(name=project.get("title") or "", column=column.get("name") or "")

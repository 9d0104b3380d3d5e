"""Contains utility functions for GitHub interactions."""


async def split_repository_in_configuration(repo: str | None) -> tuple[str, str]:
    """Splits the repository in the configuration into owner and repository."""
    if repo is None:
        raise ValueError("A repository in 'owner/repo' format is required.")
    repo = repo.strip("/")
    parts = repo.split("/")
    if len(parts) != 2 or not all(parts):
        raise ValueError("Repository must be in the format 'owner/repo' with no leading/trailing slashes or extra parts.")
    owner, repository = parts
    return owner, repository


def split_repository_url(repository_url: str) -> tuple[str, str]:
    """Return the organization and repository named by the last two segments of a repository API URL.

    For example, ``https://api.github.com/repos/octo-org/octo-repo`` yields ``("octo-org", "octo-repo")``.
    """
    parts = repository_url.rstrip("/").split("/")
    if len(parts) < 2:
        raise ValueError(f"Cannot determine organization and repository from URL: {repository_url}")
    return parts[-2], parts[-1]

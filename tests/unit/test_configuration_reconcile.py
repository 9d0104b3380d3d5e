"""Unit tests for the configuration.reconcile module."""

import pytest

from github_notion_sync.configuration.env import Settings
from github_notion_sync.configuration.exceptions import RequiredConfigurationElementError
from github_notion_sync.configuration.reconcile import validate_sync_configuration

CONFIGURATION_ENV_VARS = [
    "DEBUG",
    "GITHUB_API_URL",
    "GITHUB_TOKEN",
    "MAX_CONCURRENCY",
    "NOTION_DATABASE_ID",
    "NOTION_TOKEN",
    "REQUEST_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clear_configuration_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove any configuration from the process environment."""
    for name in CONFIGURATION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.mark.asyncio
async def test_validate_sync_configuration_prefers_cli_values() -> None:
    """Test that values given directly win over environment settings."""
    settings = Settings(
        _env_file=None,
        NOTION_TOKEN="env-notion",
        NOTION_DATABASE_ID="env-db",
        GITHUB_TOKEN="env-github",
        MAX_CONCURRENCY=3,
    )

    config = await validate_sync_configuration(
        notion_token="cli-notion",
        notion_database_id="cli-db",
        github_token="cli-github",
        max_concurrency=5,
        settings=settings,
    )

    assert config.notion_token == "cli-notion"
    assert config.notion_database_id == "cli-db"
    assert config.github_token == "cli-github"
    assert config.max_concurrency == 5


@pytest.mark.asyncio
async def test_validate_sync_configuration_falls_back_to_settings() -> None:
    """Test that missing values are taken from the environment settings."""
    settings = Settings(_env_file=None, NOTION_TOKEN="env-notion", NOTION_DATABASE_ID=" env-db ", GITHUB_TOKEN="env-github", DEBUG=True)

    config = await validate_sync_configuration(notion_token=None, notion_database_id=None, github_token=None, settings=settings)

    assert config.notion_token == "env-notion"
    assert config.notion_database_id == "env-db"
    assert config.github_token == "env-github"
    assert config.github_api_url == "https://api.github.com"
    assert config.max_concurrency == 10
    assert config.debug is True


@pytest.mark.asyncio
async def test_validate_sync_configuration_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that settings are read from environment variables."""
    monkeypatch.setenv("NOTION_TOKEN", "env-notion")
    monkeypatch.setenv("NOTION_DATABASE_ID", "env-db")
    monkeypatch.setenv("GITHUB_TOKEN", "env-github")
    monkeypatch.setenv("REQUEST_TIMEOUT", "12.5")

    config = await validate_sync_configuration(None, None, None, settings=Settings(_env_file=None))

    assert config.notion_database_id == "env-db"
    assert config.request_timeout == 12.5


@pytest.mark.asyncio
@pytest.mark.parametrize("database_id", [None, "", "   "])
async def test_validate_sync_configuration_missing_database_id(database_id: str | None) -> None:
    """Test that a missing or blank database ID is rejected before the tokens are checked."""
    with pytest.raises(RequiredConfigurationElementError, match="NOTION_DATABASE_ID") as exc_info:
        await validate_sync_configuration(notion_token=None, notion_database_id=database_id, github_token=None, settings=Settings(_env_file=None))
    assert exc_info.value.cli_name == "--notion-database-id"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "notion_token,github_token,env_name",
    [
        (None, "gh", "NOTION_TOKEN"),
        ("", "gh", "NOTION_TOKEN"),
        ("notion", None, "GITHUB_TOKEN"),
    ],
)
async def test_validate_sync_configuration_missing_token(notion_token: str | None, github_token: str | None, env_name: str) -> None:
    """Test that missing tokens are reported with their environment variable."""
    with pytest.raises(RequiredConfigurationElementError, match=env_name):
        await validate_sync_configuration(
            notion_token=notion_token, notion_database_id="db", github_token=github_token, settings=Settings(_env_file=None)
        )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "max_concurrency,request_timeout,message",
    [
        (0, None, "Maximum concurrency"),
        (-1, None, "Maximum concurrency"),
        (None, 0.0, "Request timeout"),
    ],
)
async def test_validate_sync_configuration_rejects_non_positive_limits(
    max_concurrency: int | None, request_timeout: float | None, message: str
) -> None:
    """Test that limits must be positive."""
    with pytest.raises(ValueError, match=message):
        await validate_sync_configuration(
            notion_token="notion",
            notion_database_id="db",
            github_token="gh",
            max_concurrency=max_concurrency,
            request_timeout=request_timeout,
            settings=Settings(_env_file=None),
        )

"""Fixtures for unit tests."""

from datetime import datetime, timezone
from typing import Any, Callable, Generator

import pytest
import structlog

from github_notion_sync.schemas.issue import SourceIssue


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_issue() -> Callable[..., SourceIssue]:
    """Return a factory for issue snapshots with sensible defaults."""

    def factory(**overrides: Any) -> SourceIssue:
        number = overrides.get("number", 1)
        fields: dict[str, Any] = {
            "number": number,
            "id": 1000 + number,
            "title": f"Issue {number}",
            "body": "Some body text",
            "state": "open",
            "assignees": ["alice"],
            "labels": ["bug"],
            "author": "octocat",
            "milestone": "v1.0",
            "created_at": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            "updated_at": datetime(2024, 1, 3, 3, 4, 5, tzinfo=timezone.utc),
            "html_url": f"https://github.com/octo-org/octo-repo/issues/{number}",
            "repository_url": "https://api.github.com/repos/octo-org/octo-repo",
        }
        fields.update(overrides)
        return SourceIssue(**fields)

    return factory

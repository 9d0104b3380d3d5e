"""Shared constants used across the application."""

# Notion API Limits
# -----------------

NOTION_MAX_TEXT_LENGTH = 2000
"""Notion's maximum length of the content of a single rich text object."""

NOTION_MAX_RICH_TEXT_ITEMS = 100
"""Notion's maximum number of rich text objects in one property value or block."""

NOTION_MAX_PAGE_SIZE = 100
"""Largest page size accepted by Notion's paginated endpoints."""

# GitHub Settings
# ---------------

DEFAULT_GITHUB_API_URL = "https://api.github.com"
"""Default GitHub REST API URL."""

GITHUB_ISSUES_PER_PAGE = 100
"""Page size used when listing repository issues."""

# Notion Database Property Names
# ------------------------------

NUMBER_PROPERTY = "Number"
"""Number property holding the GitHub issue number."""

ID_PROPERTY = "ID"
"""Number property holding the immutable global GitHub issue ID."""

STATUS_OPEN = "In Progress"
"""Status select option for open issues."""

STATUS_CLOSED = "Done"
"""Status select option for closed issues."""

# Synchronization Settings
# ------------------------

WORKFLOW_DISPATCH_EVENT = "workflow_dispatch"
"""GitHub Actions event name that requests a full reconciliation pass."""

ISSUE_OPENED_ACTION = "opened"
"""Webhook payload action for a newly opened issue."""

DEFAULT_REQUEST_TIMEOUT = 60.0
"""Default per-request timeout in seconds for both remote APIs."""

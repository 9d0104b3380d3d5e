"""Contains exceptions raised while synchronizing GitHub issues with Notion."""

from github_notion_sync.synchronize.results import SyncOutcome


class LedgerSyncError(Exception):
    """Raised after a reconciliation pass in which one or more page creations failed."""

    def __init__(self, outcome: SyncOutcome, first_error: BaseException | None = None) -> None:
        """Initializes the exception with the outcome of the pass and the first failure."""
        first_failure = outcome.failures[0]
        super().__init__(
            f"Failed to create {len(outcome.failures)} of {outcome.created + len(outcome.failures)} pages in Notion; "
            f"first failure for issue #{first_failure.issue_number}: {first_failure.error}"
        )
        self.outcome = outcome
        self.first_error = first_error

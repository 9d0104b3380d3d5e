"""Contains results of synchronization passes."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SyncFailure:
    """A single issue whose page could not be created."""

    issue_number: int
    error: str


@dataclass(frozen=True)
class SyncOutcome:
    """Contains results of a reconciliation pass over a whole repository."""

    issues_considered: int
    created: int
    failures: list[SyncFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Whether every attempted page creation succeeded."""
        return not self.failures

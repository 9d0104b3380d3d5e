"""Utility modules for shared functionality."""

from .concurrency import TaskOutcome, first_error, gather_settled
from .retry import retry_on_rate_limit

__all__ = [
    "TaskOutcome",
    "first_error",
    "gather_settled",
    "retry_on_rate_limit",
]

"""Bounded fan-out/fan-in helpers for independent remote operations."""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Iterable, TypeVar

T = TypeVar("T")

DEFAULT_MAX_CONCURRENCY = 10


@dataclass(frozen=True)
class TaskOutcome(Generic[T]):
    """The settled result of one task: either a value or the exception it raised."""

    value: T | None = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the task completed without raising."""
        return self.error is None


async def gather_settled(awaitables: Iterable[Awaitable[T]], max_concurrency: int = DEFAULT_MAX_CONCURRENCY) -> list[TaskOutcome[T]]:
    """Run every awaitable to completion and return their outcomes in input order.

    Unlike ``asyncio.gather``, a failing task never cancels or short-circuits the others.
    At most ``max_concurrency`` awaitables are in flight at once. Cancellation of the
    caller is propagated to all in-flight tasks.
    """
    if max_concurrency < 1:
        raise ValueError(f"max_concurrency must be at least 1, got {max_concurrency}")
    semaphore = asyncio.Semaphore(max_concurrency)

    async def run(awaitable: Awaitable[T]) -> TaskOutcome[T]:
        async with semaphore:
            try:
                return TaskOutcome(value=await awaitable)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                return TaskOutcome(error=exc)

    return list(await asyncio.gather(*(run(awaitable) for awaitable in awaitables)))


def first_error(outcomes: Iterable[TaskOutcome[Any]]) -> BaseException | None:
    """Return the exception of the first failed outcome, if any."""
    for outcome in outcomes:
        if not outcome.succeeded:
            return outcome.error
    return None

"""Retry decorator for handling GitHub and Notion API rate limits.

This module provides a decorator that implements retry logic for calls made against
either remote API, respecting the rate limit headers each service returns and falling
back to exponential backoff when no hint is given.
"""

import asyncio
import functools
import time
from typing import Any, Callable, TypeVar

import structlog
from githubkit.exception import PrimaryRateLimitExceeded, RequestFailed, SecondaryRateLimitExceeded
from notion_client import APIErrorCode, APIResponseError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _wait_time_from_headers(headers: Any, default: float, function_name: str) -> float:
    """Derive a wait time from retry-after or x-ratelimit-reset headers, if present."""
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            wait_time = float(retry_after)
            logger.info("Using retry-after header value", retry_after=wait_time, function=function_name)
            return wait_time
        except ValueError:
            logger.warning("Invalid retry-after header value", retry_after=retry_after, function=function_name)
            return default

    rate_limit_reset = headers.get("x-ratelimit-reset")
    if rate_limit_reset:
        try:
            reset_timestamp = int(rate_limit_reset)
            current_timestamp = int(time.time())
            if reset_timestamp > current_timestamp:
                wait_time = reset_timestamp - current_timestamp + 1
                logger.info("Using x-ratelimit-reset header", wait_time=wait_time, function=function_name)
                return wait_time
        except ValueError:
            logger.warning("Invalid x-ratelimit-reset header value", rate_limit_reset=rate_limit_reset, function=function_name)
    return default


def retry_on_rate_limit(
    max_retries: int = 10,
    initial_delay: float = 1.0,
    max_delay: float = 300.0,
    exponential_base: float = 2.0,
) -> Callable[[F], F]:
    """Decorator for retrying async functions when they encounter an API rate limit.

    This decorator handles:
    - GitHub primary and secondary rate limits (githubkit exceptions, 403/429)
    - Notion rate limits (``rate_limited`` error code, 429)
    - Respects retry-after and x-ratelimit-reset headers
    - Exponential backoff when the service gives no hint

    Any other exception is raised immediately without retrying.

    Args:
        max_retries: Maximum number of retry attempts (default: 10)
        initial_delay: Initial delay in seconds between retries (default: 1.0)
        max_delay: Maximum delay in seconds between retries (default: 300.0)
        exponential_base: Base for exponential backoff calculation (default: 2.0)

    Returns:
        Decorated function with retry logic

    Example:
        @retry_on_rate_limit()
        async def create_page(self, properties):
            return await self.client.pages.create(properties=properties)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            delay = initial_delay

            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)
                except (PrimaryRateLimitExceeded, SecondaryRateLimitExceeded) as e:
                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            error_type=type(e).__name__,
                            retry_after=str(e.retry_after) if hasattr(e, "retry_after") else "unknown",
                        )
                        raise

                    # These exceptions already carry retry_after as a timedelta
                    if getattr(e, "retry_after", None):
                        wait_time = min(e.retry_after.total_seconds(), max_delay)
                    else:
                        wait_time = min(delay, max_delay)

                    logger.warning(
                        f"GitHub rate limit exceeded, waiting {wait_time} seconds",
                        function=func.__name__,
                        rate_limit_type="primary" if isinstance(e, PrimaryRateLimitExceeded) else "secondary",
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

                except RequestFailed as e:
                    is_rate_limit = e.response.status_code == 429
                    is_secondary_rate_limit = e.response.status_code == 403 and "rate limit" in str(e).lower()
                    if not (is_rate_limit or is_secondary_rate_limit):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for GitHub rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.response.status_code,
                            error=str(e),
                        )
                        raise

                    wait_time = min(_wait_time_from_headers(e.response.headers, delay, func.__name__), max_delay)
                    logger.warning(
                        f"GitHub rate limit hit, retrying in {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=e.response.status_code,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

                except APIResponseError as e:
                    if not (e.code == APIErrorCode.RateLimited or e.status == 429):
                        raise

                    if attempt == max_retries:
                        logger.error(
                            "Max retries reached for Notion rate limit error",
                            function=func.__name__,
                            attempt=attempt + 1,
                            status_code=e.status,
                            error=str(e),
                        )
                        raise

                    wait_time = min(_wait_time_from_headers(e.headers, delay, func.__name__), max_delay)
                    logger.warning(
                        f"Notion rate limit hit, retrying in {wait_time} seconds",
                        function=func.__name__,
                        attempt=attempt + 1,
                        max_retries=max_retries,
                        wait_time=wait_time,
                        status_code=e.status,
                    )
                    await asyncio.sleep(wait_time)
                    delay = min(delay * exponential_base, max_delay)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            """Sync version of the retry wrapper - raises error since we only support async."""
            raise RuntimeError(
                f"Function {func.__name__} decorated with @retry_on_rate_limit must be async. This decorator only supports async functions."
            )

        if asyncio.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        else:
            return sync_wrapper  # type: ignore

    return decorator

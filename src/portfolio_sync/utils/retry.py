# ABOUTME: Notion API error types and rate-limit retry logic using tenacity
# ABOUTME: Only HTTP 429 answers are retried; every other failure propagates immediately

from collections.abc import Callable
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from portfolio_sync.utils.logging import get_logger

logger = get_logger(__name__)


class NotionAPIError(Exception):
    """Base exception for Notion API-related errors."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class NotionRateLimitError(NotionAPIError):
    """Raised when Notion answers 429 rate_limited."""

    pass


class NotionRequestError(NotionAPIError):
    """Raised for any other non-2xx answer or transport failure."""

    pass


def convert_response_error(response: httpx.Response) -> NotionAPIError:
    """Map a failed Notion response onto the error hierarchy."""
    code = None
    message = response.reason_phrase or "request failed"
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        code = body.get("code")
        message = body.get("message") or message

    text = f"Notion API {response.status_code} for {response.request.url}: {message}"
    if response.status_code == 429:
        return NotionRateLimitError(text, status_code=429, code=code or "rate_limited")
    return NotionRequestError(text, status_code=response.status_code, code=code)


def _log_rate_limit_wait(retry_state: RetryCallState) -> None:
    logger.warning(
        "Notion rate limit hit, backing off",
        attempt=retry_state.attempt_number,
        wait_seconds=round(retry_state.next_action.sleep, 2) if retry_state.next_action else None,
    )


def rate_limit_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 10.0,
):
    """Retry decorator that backs off on NotionRateLimitError only.

    Waits double from ``min_wait`` up to ``max_wait`` between attempts.
    """

    def decorator(func: Callable):
        async def wrapper(*args: Any, **kwargs: Any):
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
                retry=retry_if_exception_type(NotionRateLimitError),
                before_sleep=_log_rate_limit_wait,
                reraise=True,
            ):
                with attempt:
                    return await func(*args, **kwargs)

        return wrapper

    return decorator

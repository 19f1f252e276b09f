"""
Error classification and retry for the crawl and text-generation calls.

classify() maps an exception to a coarse category by case-insensitive
substring matching on its message. Categories are checked in a fixed order
and the first match wins, because some keyword sets overlap ("connection
timed out" is a connection failure, not a timeout).

with_retry() is plain capped exponential backoff on top of tenacity:
    delay(attempt) = min(initial_delay * backoff_factor ** (attempt - 1), max_delay)
No jitter, no circuit breaker, no budget shared across calls.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorCategory(str, Enum):
    CREDENTIALS = "credentials"
    CONNECTION = "connection"
    RATE_LIMIT = "rate_limit"
    MALFORMED_RESPONSE = "malformed_response"
    PARSE = "parse"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


# Checked top to bottom; first match wins
_CATEGORY_KEYWORDS: Tuple[Tuple[ErrorCategory, Tuple[str, ...]], ...] = (
    (ErrorCategory.CREDENTIALS, (
        "api key", "apikey", "api_key", "invalid key", "unauthorized",
        "unauthenticated", "authentication", "permission denied", "permission_denied",
        "forbidden", "401", "403", "apiキー", "認証",
    )),
    (ErrorCategory.CONNECTION, (
        "connection", "connect error", "connecterror", "network", "econnrefused", "econnreset",
        "enotfound", "socket hang up", "name or service not known",
        "dns", "接続",
    )),
    (ErrorCategory.RATE_LIMIT, (
        "rate limit", "ratelimit", "rate_limit", "too many requests", "429",
        "quota", "resource_exhausted", "resource exhausted", "レート制限",
    )),
    (ErrorCategory.MALFORMED_RESPONSE, (
        "invalid response", "malformed", "unexpected response", "empty response",
        "bad gateway", "service unavailable", "502", "503", "500 internal",
    )),
    (ErrorCategory.PARSE, (
        "json", "parse", "decode", "形式が不正",
    )),
    (ErrorCategory.TIMEOUT, (
        "timeout", "timed out", "etimedout", "deadline exceeded", "deadline_exceeded",
        "504", "タイムアウト",
    )),
)

_RETRYABLE = frozenset({
    ErrorCategory.CONNECTION,
    ErrorCategory.RATE_LIMIT,
    ErrorCategory.MALFORMED_RESPONSE,
    ErrorCategory.TIMEOUT,
})

_USER_MESSAGES = {
    ErrorCategory.CREDENTIALS: "Authentication with the AI service failed",
    ErrorCategory.CONNECTION: "Could not connect to the AI service",
    ErrorCategory.RATE_LIMIT: "The AI service rate limit was reached; try again later",
    ErrorCategory.MALFORMED_RESPONSE: "The AI service returned an invalid response",
    ErrorCategory.PARSE: "The AI response could not be parsed",
    ErrorCategory.TIMEOUT: "The AI service did not respond in time",
    ErrorCategory.UNKNOWN: "An unexpected error occurred during keyword generation",
}


@dataclass(frozen=True)
class Classification:
    category: ErrorCategory
    retryable: bool


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff parameters (delays in seconds)."""

    max_attempts: int = 3
    initial_delay: float = 1.0
    max_delay: float = 10.0
    backoff_factor: float = 2.0


def _error_text(error: BaseException) -> str:
    # Timeout exceptions from httpx/asyncio often carry an empty message
    return f"{type(error).__name__}: {error}".lower()


def classify(error: BaseException) -> Classification:
    """
    Classify an exception raised by a network or AI call.

    >>> classify(Exception("Rate limit exceeded")).category
    <ErrorCategory.RATE_LIMIT: 'rate_limit'>
    """
    text = _error_text(error)

    for category, keywords in _CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return Classification(category=category, retryable=category in _RETRYABLE)

    return Classification(category=ErrorCategory.UNKNOWN, retryable=False)


def user_message(classification: Classification) -> str:
    """Short label for a classified failure."""
    return _USER_MESSAGES[classification.category]


def _is_retryable(error: BaseException) -> bool:
    return classify(error).retryable


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed "
        f"({classify(error).category.value if error else 'unknown'}); "
        f"retrying in {delay:.2f}s"
    )


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await operation(), retrying retryable failures with capped backoff.

    Args:
        operation: Zero-argument coroutine function to call
        policy: Backoff parameters (defaults to RetryPolicy())
        sleep: Awaitable sleep, injectable for tests

    Returns:
        The operation's result

    Raises:
        The last exception, unchanged, on a non-retryable failure or once
        max_attempts is exhausted
    """
    policy = policy or RetryPolicy()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, policy.max_attempts)),
        wait=wait_exponential(
            multiplier=policy.initial_delay,
            exp_base=policy.backoff_factor,
            max=policy.max_delay,
        ),
        retry=retry_if_exception(_is_retryable),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )

    return await retrying(operation)

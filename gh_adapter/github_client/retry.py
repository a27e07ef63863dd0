"""Bounded retry with exponential backoff for idempotent reads."""

import logging
import random
import time
from collections.abc import Callable
from typing import TypeVar

import requests
from github.GithubException import GithubException

from ..config import RetryPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Rate-limit responses (403 with exhausted quota) are not retried: waiting out
# a quota window is the caller's decision.
RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


def is_retryable(error: Exception) -> bool:
    """Check whether a failed read is worth another attempt."""
    if isinstance(error, (requests.ConnectionError, requests.Timeout)):
        return True
    if isinstance(error, GithubException):
        return error.status in RETRYABLE_STATUSES
    return False


def compute_backoff(
    policy: RetryPolicy,
    attempt: int,
    uniform: Callable[[float, float], float] = random.uniform,
) -> float:
    """Compute the wait before the next attempt.

    Args:
        policy: Retry policy in force
        attempt: Number of the attempt that just failed, starting at 1
        uniform: Random source, replaceable in tests

    Returns:
        Seconds to wait
    """
    backoff = min(policy.backoff_base * (2 ** (attempt - 1)), policy.max_backoff)
    if policy.jitter:
        backoff += uniform(0, policy.jitter)
    return backoff


def call_with_retries(
    func: Callable[[], T],
    policy: RetryPolicy,
    description: str = "request",
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``func`` and retry transient failures according to ``policy``.

    Only use this for requests that are safe to repeat. The last error is
    re-raised once attempts are exhausted, and non-transient errors are
    re-raised immediately.
    """
    attempt = 1
    while True:
        try:
            return func()
        except (requests.RequestException, GithubException) as e:
            if attempt >= policy.max_attempts or not is_retryable(e):
                raise
            wait = compute_backoff(policy, attempt)
            logger.warning(
                "%s failed (%s), retry %d/%d in %.2fs",
                description,
                e,
                attempt,
                policy.max_attempts - 1,
                wait,
            )
            sleep(wait)
            attempt += 1

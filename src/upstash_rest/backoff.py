"""Retry backoff policies.

A backoff policy maps a zero-based attempt index to the number of seconds
to wait before the next attempt.
"""

from __future__ import annotations

import math
from collections.abc import Callable

BackoffFn = Callable[[int], float]

DEFAULT_MAX_ATTEMPTS = 5
BASE_DELAY = 0.05  # seconds


def default_backoff(attempt: int) -> float:
    """Exponential backoff: 50ms * e**attempt."""
    return BASE_DELAY * math.exp(attempt)


def constant_backoff(delay: float) -> BackoffFn:
    """Build a policy that always waits ``delay`` seconds."""

    def backoff(attempt: int) -> float:
        return delay

    return backoff


def no_backoff(attempt: int) -> float:
    """Retry immediately."""
    return 0.0

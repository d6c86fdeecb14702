"""Backoff policy: wait durations and retry budget across attempts.

Functions here are pure; RoundTracker carries one sequence forward.
Durations are whole milliseconds.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Optional

from retryfetch.domain.config.retry import RetryConfig


@dataclass(frozen=True)
class RetryRound:
    remaining_retries: int
    backoff: int  # Wait before the next attempt, ms
    backoff_factor: float


def next_backoff(backoff: int, factor: float) -> int:
    """Scale a backoff and round half up to a whole millisecond."""
    return int(math.floor(backoff * factor + 0.5))


def first_round(config: RetryConfig) -> RetryRound:
    return RetryRound(
        remaining_retries=config.max_retries,
        backoff=config.initial_backoff,
        backoff_factor=config.backoff_factor,
    )


def next_round(current: RetryRound) -> RetryRound:
    """Round state after one retry has been spent.

    Raises:
        ValueError: If no retries are left
    """
    if current.remaining_retries <= 0:
        raise ValueError("No retries left to spend")
    return replace(
        current,
        remaining_retries=current.remaining_retries - 1,
        backoff=next_backoff(current.backoff, current.backoff_factor),
    )


def round_for_attempt(config: RetryConfig, attempts_made: int) -> RetryRound:
    """Round state in effect after `attempts_made` failed attempts.

    The first failure uses the initial round; each further failure
    advances it once.
    """
    if attempts_made < 1:
        raise ValueError("attempts_made must be >= 1")
    current = first_round(config)
    for _ in range(attempts_made - 1):
        current = next_round(current)
    return current


def backoff_schedule(config: RetryConfig) -> List[int]:
    """All waits an exhausted sequence would make, in order."""
    tracker = RoundTracker(config)
    return [tracker.for_attempt(n).backoff for n in range(1, config.max_retries + 1)]


class RoundTracker:
    """Round state of one retry sequence, carried forward one wait at a time.

    Never advances past the retry budget, so no backoff is computed for a
    wait that cannot happen.
    """

    def __init__(self, config: RetryConfig):
        self.max_retries = config.max_retries
        self.current = first_round(config)
        self._failures = 1  # failed attempts the current round belongs to

    def for_attempt(self, attempts_made: int) -> Optional[RetryRound]:
        """Round for the wait after `attempts_made` failures, None once the budget is spent"""
        if attempts_made > self.max_retries:
            return None
        if attempts_made < self._failures:
            raise ValueError("Retry rounds only move forward")
        while self._failures < attempts_made:
            self.current = next_round(self.current)
            self._failures += 1
        return self.current

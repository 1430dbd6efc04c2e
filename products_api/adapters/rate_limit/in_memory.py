"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Pruning is lazy: a key's timestamps are only cleaned up on its next call.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from typing import Callable

from products_api.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests in a trailing window per key.

    Each key keeps the timestamps of its accepted requests. A request is
    allowed while fewer than ``limit`` of them are at most ``window_seconds``
    old. Denied attempts are not recorded, so a client hammering a closed
    window does not extend its own lockout.
    """

    def __init__(
        self,
        *,
        limit: int = 100,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Default maximum number of requests per window.
            window_seconds: Default window size in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        self._validate(limit, window_seconds)

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[str, deque[float]] = {}

    @staticmethod
    def _validate(limit: int, window_seconds: float) -> None:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

    def _prune_locked(self, key: str, now: float, window_seconds: float) -> deque[float]:
        timestamps = self._windows.setdefault(key, deque())
        while timestamps and now - timestamps[0] > window_seconds:
            timestamps.popleft()
        return timestamps

    @staticmethod
    def _expires_at(oldest: float, window_seconds: float) -> int:
        # First whole second at which ``now - oldest > window_seconds`` holds.
        return int(math.floor(oldest + window_seconds)) + 1

    def consume(
        self,
        key: str,
        *,
        limit: int | None = None,
        window_seconds: float | None = None,
    ) -> RateLimitResult:
        """Check the trailing window for ``key`` and record the attempt if allowed.

        Args:
            key: Unique identifier for rate limiting (e.g. client IP).
            limit: Override for the instance limit.
            window_seconds: Override for the instance window.

        Returns:
            RateLimitResult with the decision and header metadata.

        Raises:
            ValueError: If key is empty or the overrides are invalid.
        """
        if not key:
            raise ValueError("key must be a non-empty string")

        limit = self._limit if limit is None else limit
        window_seconds = self._window_seconds if window_seconds is None else window_seconds
        self._validate(limit, window_seconds)

        with self._lock:
            now = self._clock()
            timestamps = self._prune_locked(key, now, window_seconds)

            if len(timestamps) >= limit:
                return RateLimitResult(
                    allowed=False,
                    limit=limit,
                    remaining=0,
                    reset_at=self._expires_at(timestamps[0], window_seconds),
                    retry_after_seconds=int(math.floor(timestamps[0] + window_seconds - now)) + 1,
                )

            timestamps.append(now)
            return RateLimitResult(
                allowed=True,
                limit=limit,
                remaining=limit - len(timestamps),
                reset_at=self._expires_at(timestamps[0], window_seconds),
                retry_after_seconds=None,
            )

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()

    def tracked_keys(self) -> int:
        """Number of keys seen since the last clear."""
        with self._lock:
            return len(self._windows)

    def pending(self, key: str) -> int:
        """Timestamps currently held for ``key``, as of its last call."""
        with self._lock:
            return len(self._windows.get(key, ()))

"""Rate limiter interfaces.

The API depends on this abstraction, not on the concrete implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit decision.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Requests still available in the trailing window.
        reset_at: UNIX epoch seconds when the oldest tracked request leaves
            the window.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def consume(
        self,
        key: str,
        *,
        limit: int | None = None,
        window_seconds: float | None = None,
    ) -> RateLimitResult:
        """Record an attempt for ``key`` and decide whether it is allowed.

        Args:
            key: Unique identifier (e.g. client IP address).
            limit: Override for the configured request limit.
            window_seconds: Override for the configured window size.

        Returns:
            RateLimitResult describing the decision.
        """
        raise NotImplementedError

    def check(
        self,
        key: str,
        limit: int | None = None,
        window_seconds: float | None = None,
    ) -> bool:
        """Boolean shortcut for :meth:`consume`."""
        return self.consume(key, limit=limit, window_seconds=window_seconds).allowed

    @abstractmethod
    def clear(self) -> None:
        """Forget every tracked key."""
        raise NotImplementedError

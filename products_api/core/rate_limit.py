"""Rate limiting dependency for FastAPI routes.

Wires the sliding-window limiter into the HTTP layer. The limiter instance
lives on ``app.state`` (built by the app factory), so each app, and each
test, gets its own independent budget.

Strategy: one bucket per client address.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from products_api.adapters.rate_limit.base import AbstractRateLimiter
from products_api.core.config import AppSettings
from products_api.core.errors import RateLimitedAppError

logger = logging.getLogger(__name__)


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    """Return the limiter attached to the running application."""

    return request.app.state.rate_limiter


def _build_rate_limit_key(request: Request) -> str:
    client_host = request.client.host if request.client else "unknown"
    return f"ip:{client_host}"


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing the per-client sliding window.

    Args:
        request: FastAPI request.

    Raises:
        RateLimitedAppError: When the client exhausted its window (HTTP 429).
    """

    app_settings: AppSettings = request.app.state.settings
    if not app_settings.rate_limit_enabled:
        return

    limiter = get_rate_limiter(request)
    key = _build_rate_limit_key(request)
    key_hash = _hash_limiter_key(key)

    result = limiter.consume(key)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": key_hash,
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": key_hash,
            "limit": result.limit,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if app_settings.rate_limit_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise RateLimitedAppError(
        code="rate_limit_exceeded",
        message="Rate limit exceeded",
        details={"limit": result.limit, "retry_after": retry_after},
        headers=headers or None,
    )

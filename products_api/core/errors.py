"""Application-level exception types.

Domain errors raised by the service layer and translated to HTTP responses
by the global exception handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    product_id: int
    limit: int
    retry_after: int
    errors: list[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when a request body, path or query parameter is malformed."""


class NotFoundAppError(AppError):
    """Raised when a product id does not exist."""


@dataclass
class RateLimitedAppError(AppError):
    """Raised when a client exceeds its sliding-window budget."""

    headers: dict[str, str] | None = None

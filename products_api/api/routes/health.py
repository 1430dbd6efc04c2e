from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from products_api.schemas.product import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint.

    Returns:
        HealthResponse with status "ok" and the current UTC time.
    """

    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())

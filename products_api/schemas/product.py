"""Pydantic schemas for product requests and responses."""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ProductPayload(BaseModel):
    """Body of create and update requests."""

    fields: Dict[str, Any] = Field(
        ...,
        description="Arbitrary JSON fields. On update, only these keys are replaced.",
        examples=[{"name": "Ultramie", "price": 25000}],
    )


class ProductResponse(BaseModel):
    """A product as returned by create, update and listing."""

    id: int = Field(..., description="Store-assigned product id.")
    fields: Dict[str, Any] = Field(..., description="Current product fields.")


class PaginationMeta(BaseModel):
    page: int
    per_page: int
    total: int = Field(..., description="Number of products in the store.")
    total_pages: int = Field(..., description="ceil(total / per_page).")


class ProductPage(BaseModel):
    """One page of products plus pagination metadata."""

    data: List[ProductResponse] = Field(default_factory=list)
    pagination: PaginationMeta


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = Field(..., description="Always 'ok' when the process is serving.")
    timestamp: str = Field(..., description="Current server time, ISO-8601 UTC.")

"""Product CRUD and pagination endpoints.

Routes are plain ``def`` functions: FastAPI runs them in its threadpool and
the store's lock serializes access to shared state.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Query, Request

from products_api.core.config import AppSettings
from products_api.core.rate_limit import enforce_rate_limit
from products_api.schemas.product import (
    MessageResponse,
    ProductPage,
    ProductPayload,
    ProductResponse,
)
from products_api.services.product_service import ProductService

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(enforce_rate_limit)],
)


def get_product_service(request: Request) -> ProductService:
    """Build the service around the store owned by the running app."""
    cfg: AppSettings = request.app.state.settings
    return ProductService(
        request.app.state.store,
        default_per_page=cfg.default_per_page,
        max_per_page=cfg.max_per_page,
    )


@router.get("", response_model=ProductPage)
def list_products(
    page: int | None = Query(None, description="1-indexed page number (default 1)."),
    per_page: int | None = Query(None, description="Page size (default 20, max 100)."),
    service: ProductService = Depends(get_product_service),
) -> ProductPage:
    """List products in creation order, one page at a time."""
    return service.list_products(page, per_page)


@router.post("", response_model=ProductResponse)
def create_product(
    payload: ProductPayload,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Create a product from arbitrary fields.

    Raises:
        ValidationAppError: 400 when the body lacks a ``fields`` object.
    """
    return service.create_product(payload.fields)


@router.get("/{product_id}", response_model=Dict[str, Any])
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    """Return the fields of one product (404 if unknown)."""
    return service.get_product(product_id)


@router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    payload: ProductPayload,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Merge the submitted fields into a product.

    Only keys present in ``fields`` are replaced; nested objects are replaced
    wholesale, not merged.
    """
    return service.update_product(product_id, payload.fields)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
) -> MessageResponse:
    """Delete a product. Always succeeds, even for unknown ids."""
    service.delete_product(product_id)
    return MessageResponse(message="Product deleted")

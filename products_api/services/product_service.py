"""Product service: the application layer between HTTP routes and the store.

Responsibilities:
- clamp pagination parameters and compute total_pages
- turn the store's "not found" results into NotFoundAppError
- log product lifecycle events without logging field values
"""

from __future__ import annotations

import logging
from typing import Any

from products_api.adapters.store.base import AbstractRecordStore, Record
from products_api.core.errors import NotFoundAppError
from products_api.schemas.product import PaginationMeta, ProductPage, ProductResponse

logger = logging.getLogger(__name__)


def clamp_pagination(
    page: int | None,
    per_page: int | None,
    *,
    default_per_page: int = 20,
    max_per_page: int = 100,
) -> tuple[int, int]:
    """Apply defaults and bounds to client supplied pagination values.

    Args:
        page: Requested 1-indexed page, or None for the first page.
        per_page: Requested page size, or None for the default.
        default_per_page: Page size used when per_page is omitted.
        max_per_page: Largest page size honoured.

    Returns:
        Tuple of (page, per_page) with ``page >= 1`` and
        ``1 <= per_page <= max_per_page``.

    Examples:
        >>> clamp_pagination(None, None)
        (1, 20)
        >>> clamp_pagination(0, 500)
        (1, 100)
        >>> clamp_pagination(3, -4)
        (3, 1)
    """
    page = 1 if page is None else max(1, page)
    per_page = default_per_page if per_page is None else per_page
    per_page = min(max(1, per_page), max_per_page)
    return page, per_page


def _to_response(record: Record) -> ProductResponse:
    return ProductResponse(id=record.id, fields=record.fields)


def _not_found(product_id: int) -> NotFoundAppError:
    return NotFoundAppError(
        code="product_not_found",
        message="Product not found",
        details={"product_id": product_id},
    )


class ProductService:
    """Product use cases on top of an AbstractRecordStore."""

    def __init__(
        self,
        store: AbstractRecordStore,
        *,
        default_per_page: int = 20,
        max_per_page: int = 100,
    ) -> None:
        self._store = store
        self._default_per_page = default_per_page
        self._max_per_page = max_per_page

    def list_products(self, page: int | None = None, per_page: int | None = None) -> ProductPage:
        """Return one page of products in creation order.

        Pages past the end are empty, not errors.
        """
        page, per_page = clamp_pagination(
            page,
            per_page,
            default_per_page=self._default_per_page,
            max_per_page=self._max_per_page,
        )
        records = self._store.paginate(page, per_page)
        total = self._store.count()

        return ProductPage(
            data=[_to_response(r) for r in records],
            pagination=PaginationMeta(
                page=page,
                per_page=per_page,
                total=total,
                total_pages=-(-total // per_page),
            ),
        )

    def create_product(self, fields: dict[str, Any]) -> ProductResponse:
        record = self._store.create(fields)
        logger.info(
            "product.created",
            extra={"product_id": record.id, "field_count": len(record.fields)},
        )
        return _to_response(record)

    def get_product(self, product_id: int) -> dict[str, Any]:
        """Return the fields of a product.

        Raises:
            NotFoundAppError: If the id is unknown.
        """
        fields = self._store.find(product_id)
        if fields is None:
            raise _not_found(product_id)
        return fields

    def update_product(self, product_id: int, new_fields: dict[str, Any]) -> ProductResponse:
        """Shallow-merge ``new_fields`` into a product.

        Raises:
            NotFoundAppError: If the id is unknown.
        """
        record = self._store.update(product_id, new_fields)
        if record is None:
            raise _not_found(product_id)

        logger.info(
            "product.updated",
            extra={"product_id": product_id, "field_keys": sorted(new_fields)},
        )
        return _to_response(record)

    def delete_product(self, product_id: int) -> None:
        """Delete a product. Unknown ids are not an error."""
        removed = self._store.delete(product_id)
        logger.info("product.deleted", extra={"product_id": product_id, "existed": removed})

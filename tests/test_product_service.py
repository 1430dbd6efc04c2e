"""Tests for the product service layer."""

import logging

import pytest

from products_api.adapters.store.in_memory import InMemoryRecordStore
from products_api.core.errors import NotFoundAppError
from products_api.services.product_service import ProductService, clamp_pagination


@pytest.fixture
def service(store: InMemoryRecordStore) -> ProductService:
    return ProductService(store)


class TestClampPagination:
    @pytest.mark.parametrize(
        "page,per_page,expected",
        [
            (None, None, (1, 20)),
            (2, 5, (2, 5)),
            (0, 20, (1, 20)),
            (-3, 20, (1, 20)),
            (1, 0, (1, 1)),
            (1, -10, (1, 1)),
            (1, 101, (1, 100)),
            (1, 100, (1, 100)),
        ],
    )
    def test_bounds(self, page, per_page, expected) -> None:
        assert clamp_pagination(page, per_page) == expected

    def test_custom_defaults(self) -> None:
        assert clamp_pagination(None, None, default_per_page=5, max_per_page=10) == (1, 5)
        assert clamp_pagination(None, 50, default_per_page=5, max_per_page=10) == (1, 10)


class TestListProducts:
    def test_empty_store(self, service: ProductService) -> None:
        page = service.list_products()

        assert page.data == []
        assert page.pagination.model_dump() == {
            "page": 1,
            "per_page": 20,
            "total": 0,
            "total_pages": 0,
        }

    def test_total_pages_rounds_up(self, service: ProductService) -> None:
        for i in range(1, 6):
            service.create_product({"name": f"Product {i}"})

        page = service.list_products(3, 2)

        assert [p.id for p in page.data] == [5]
        assert page.pagination.total == 5
        assert page.pagination.total_pages == 3

    def test_page_past_end_is_empty(self, service: ProductService) -> None:
        service.create_product({"name": "only"})

        page = service.list_products(9, 10)

        assert page.data == []
        assert page.pagination.page == 9
        assert page.pagination.total_pages == 1

    def test_clamps_before_paginating(self, store: InMemoryRecordStore) -> None:
        service = ProductService(store, default_per_page=2, max_per_page=3)
        for i in range(5):
            service.create_product({"i": i})

        page = service.list_products(0, 10)

        assert page.pagination.page == 1
        assert page.pagination.per_page == 3
        assert len(page.data) == 3


class TestProductLifecycle:
    def test_create_get_update_delete(self, service: ProductService) -> None:
        created = service.create_product({"name": "Ultramie", "price": 25000})
        assert created.id == 1

        assert service.get_product(created.id) == {"name": "Ultramie", "price": 25000}

        updated = service.update_product(created.id, {"price": 30000})
        assert updated.fields == {"name": "Ultramie", "price": 30000}

        service.delete_product(created.id)
        with pytest.raises(NotFoundAppError):
            service.get_product(created.id)

    def test_unknown_id_raises_not_found(self, service: ProductService) -> None:
        with pytest.raises(NotFoundAppError) as exc_info:
            service.get_product(7)
        assert exc_info.value.code == "product_not_found"
        assert exc_info.value.details == {"product_id": 7}

        with pytest.raises(NotFoundAppError):
            service.update_product(7, {"a": 1})

    def test_delete_unknown_id_is_silent(self, service: ProductService) -> None:
        service.delete_product(123)
        service.delete_product(123)

    def test_logs_do_not_include_field_values(
        self, service: ProductService, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="products_api.services.product_service"):
            created = service.create_product({"secret_code": "s3cr3t"})
            service.update_product(created.id, {"secret_code": "n3w"})

        events = [r.getMessage() for r in caplog.records]
        assert events == ["product.created", "product.updated"]
        assert caplog.records[1].field_keys == ["secret_code"]
        assert "s3cr3t" not in caplog.text
        assert "n3w" not in caplog.text

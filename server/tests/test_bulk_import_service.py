"""Tests for BulkImportService against a real database session."""
from __future__ import annotations

from typing import Any

import pytest
from sqlalchemy.orm import Session

from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.product_import import ImportRow
from storefront.services.bulk_import_service import BatchTooLargeError, BulkImportService
from storefront.services.category_repository import CategoryRepository
from storefront.services.product_repository import ProductRepository


def make_rows(count: int, **overrides: Any) -> list[ImportRow]:
    rows = []
    for i in range(1, count + 1):
        data: dict[str, Any] = {
            "name": f"Product {i}",
            "sku": f"SKU-{i:03d}",
            "price": f"{i}.99",
            "hidePrice": "false",
            "description": f"Description {i}",
            "category": "Electronics",
            "stockStatus": "in stock",
            "features": "Feature 1, Feature 2,, Feature 3",
            "images": "https://img.example/a.jpg, https://img.example/b.jpg",
        }
        data.update(overrides)
        rows.append(ImportRow.model_validate(data))
    return rows


def make_service(session: Session, **kwargs: Any) -> BulkImportService:
    return BulkImportService(CategoryRepository(session), ProductRepository(session), **kwargs)


class UnreachableCategoryStore:
    def get_categories(self):
        raise ConnectionError("category store unreachable")


class TestBulkImportService:
    """Test suite for BulkImportService."""

    def test_commit_creates_products(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session)

        outcome = service.run(make_rows(3))

        assert outcome.success is True
        assert outcome.errors == []
        assert outcome.results.created == 3
        assert outcome.results.updated == 0
        product = db_session.query(Product).filter_by(sku="SKU-001").one()
        assert product.category_id == categories[0].id
        assert product.stock_status == "IN_STOCK"
        assert [f.text for f in product.features] == ["Feature 1", "Feature 2", "Feature 3"]
        assert len(product.images) == 2

    def test_second_import_updates(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session)
        rows = make_rows(3)

        first = service.run(rows, update_existing=True)
        second = service.run(rows, update_existing=True)

        assert (first.results.created, first.results.updated) == (3, 0)
        assert (second.results.created, second.results.updated) == (0, 3)
        assert [w.row for w in second.warnings] == [1, 2, 3]
        assert db_session.query(Product).count() == 3

    def test_update_disabled_fails_every_existing_row(
        self, db_session: Session, categories: list[Category]
    ) -> None:
        service = make_service(db_session)
        service.run(make_rows(2))

        outcome = service.run(make_rows(2, name="Changed"), update_existing=False)

        assert outcome.success is True
        assert (outcome.results.created, outcome.results.updated, outcome.results.failed) == (0, 0, 2)
        assert [e.message for e in outcome.results.errors] == [
            "SKU SKU-001 already exists (update mode disabled)",
            "SKU SKU-002 already exists (update mode disabled)",
        ]
        assert {p.name for p in db_session.query(Product)} == {"Product 1", "Product 2"}

    def test_validate_only_never_writes(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session)

        outcome = service.run(make_rows(2), validate_only=True)

        assert outcome.success is True
        assert outcome.results is None
        assert db_session.query(Product).count() == 0

    def test_validate_only_reports_errors(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session)

        outcome = service.run(make_rows(1, category="Toys"), validate_only=True)

        assert outcome.success is False
        assert [e.field for e in outcome.errors] == ["category"]

    def test_invalid_batch_is_not_committed(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session)
        rows = make_rows(2) + make_rows(1, price="-1", sku="BAD")

        outcome = service.run(rows)

        assert outcome.success is False
        assert outcome.results is None
        assert [(e.row, e.field) for e in outcome.errors] == [(3, "price")]
        assert db_session.query(Product).count() == 0

    def test_validate_uses_current_catalog(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session)
        service.run(make_rows(1))

        result = service.validate(make_rows(1))

        assert result.valid is True
        assert [w.message for w in result.warnings] == ['SKU "SKU-001" already exists and will be updated']

    def test_rejects_batches_over_the_limit(self, db_session: Session, categories: list[Category]) -> None:
        service = make_service(db_session, max_rows=2)

        with pytest.raises(BatchTooLargeError):
            service.run(make_rows(3))

        assert db_session.query(Product).count() == 0

    def test_snapshot_failure_propagates(self, db_session: Session) -> None:
        service = BulkImportService(UnreachableCategoryStore(), ProductRepository(db_session))

        with pytest.raises(ConnectionError):
            service.run(make_rows(1))

"""Tests for the bulk import validator."""
from __future__ import annotations

from typing import Any

import pytest

from storefront.schemas.product_import import ImportRow
from storefront.services.catalog_snapshot import CategoryRef, ExistingProductRef
from storefront.services.import_validator import ImportValidator, ValidationIssue, ValidationResult

CATEGORIES = [CategoryRef(id=1, name="Electronics"), CategoryRef(id=2, name="Home & Garden")]


def make_row(**overrides: Any) -> ImportRow:
    """Build a row that passes validation unless overridden."""
    data: dict[str, Any] = {
        "name": "Wireless Mouse",
        "sku": "MOUSE-001",
        "price": "24.99",
        "description": "Ergonomic wireless mouse",
        "category": "Electronics",
        "stockStatus": "IN_STOCK",
    }
    data.update(overrides)
    return ImportRow.model_validate(data)


@pytest.fixture
def validator() -> ImportValidator:
    return ImportValidator(CATEGORIES, [ExistingProductRef(id=10, sku="EXISTING-1")])


class TestValidateRow:
    """Test suite for per-row checks."""

    def test_valid_row_has_no_errors(self, validator: ImportValidator) -> None:
        assert validator.validate_row(make_row(), 1) == []

    @pytest.mark.parametrize("field", ["name", "sku", "description"])
    @pytest.mark.parametrize("blank", [None, "", "   "])
    def test_missing_required_field(self, validator: ImportValidator, field: str, blank: str | None) -> None:
        errors = validator.validate_row(make_row(**{field: blank}), 3)

        assert len(errors) == 1
        assert errors[0].field == field
        assert errors[0].row == 3

    def test_missing_category(self, validator: ImportValidator) -> None:
        errors = validator.validate_row(make_row(category=""), 1)

        assert [e.field for e in errors] == ["category"]
        assert errors[0].message == "Category is required"

    def test_unknown_category_lists_available_names(self, validator: ImportValidator) -> None:
        errors = validator.validate_row(make_row(category="Toys"), 1)

        assert len(errors) == 1
        assert errors[0].field == "category"
        assert "Electronics" in errors[0].message
        assert "Home & Garden" in errors[0].message

    def test_category_match_is_case_insensitive(self, validator: ImportValidator) -> None:
        assert validator.validate_row(make_row(category="home & GARDEN"), 1) == []

    @pytest.mark.parametrize("price", ["abc", "", None, "-1", -0.01])
    def test_invalid_price(self, validator: ImportValidator, price: Any) -> None:
        errors = validator.validate_row(make_row(price=price), 1)

        assert len(errors) == 1
        assert errors[0].field == "price"

    @pytest.mark.parametrize("price", ["0", 0, "0.00", 12.5])
    def test_zero_and_positive_price_are_valid(self, validator: ImportValidator, price: Any) -> None:
        assert validator.validate_row(make_row(price=price), 1) == []

    def test_stock_status_is_normalized(self, validator: ImportValidator) -> None:
        assert validator.validate_row(make_row(stockStatus=" low stock "), 1) == []

    def test_unknown_stock_status(self, validator: ImportValidator) -> None:
        errors = validator.validate_row(make_row(stockStatus="PRE_ORDER"), 1)

        assert len(errors) == 1
        assert errors[0].field == "stockStatus"
        assert "IN_STOCK, LOW_STOCK, OUT_OF_STOCK, BACKORDER" in errors[0].message

    def test_absent_stock_status_is_allowed(self, validator: ImportValidator) -> None:
        assert validator.validate_row(make_row(stockStatus=None), 1) == []
        assert validator.validate_row(make_row(stockStatus=""), 1) == []

    def test_collects_every_error_on_a_row(self, validator: ImportValidator) -> None:
        row = ImportRow(price="oops", stock_status="sold out")

        fields = [e.field for e in validator.validate_row(row, 1)]

        assert fields == ["name", "sku", "description", "category", "price", "stockStatus"]


class TestValidateAll:
    """Test suite for batch validation."""

    def test_empty_batch(self, validator: ImportValidator) -> None:
        assert validator.validate_all([]) == ValidationResult(valid=True, errors=[], warnings=[])

    def test_duplicate_sku_flags_later_rows_only(self, validator: ImportValidator) -> None:
        rows = [make_row(sku="A"), make_row(sku="B"), make_row(sku="A")]

        result = validator.validate_all(rows)

        assert result.valid is False
        assert result.errors == [ValidationIssue(3, "sku", 'Duplicate SKU "A" found in import file')]

    def test_duplicate_detection_ignores_surrounding_whitespace(self, validator: ImportValidator) -> None:
        result = validator.validate_all([make_row(sku="A"), make_row(sku=" A ")])

        assert [(e.row, e.field) for e in result.errors] == [(2, "sku")]

    def test_existing_sku_is_a_warning(self) -> None:
        validator = ImportValidator(CATEGORIES, [ExistingProductRef(id=1, sku="A")])

        result = validator.validate_all([make_row(sku="A"), make_row(sku="B")])

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == [ValidationIssue(1, "sku", 'SKU "A" already exists and will be updated')]

    def test_existing_duplicate_is_an_error_not_a_second_warning(self) -> None:
        validator = ImportValidator(CATEGORIES, [ExistingProductRef(id=1, sku="A")])

        result = validator.validate_all([make_row(sku="A"), make_row(sku="A")])

        assert [(e.row, e.field) for e in result.errors] == [(2, "sku")]
        assert [w.row for w in result.warnings] == [1]

    def test_errors_are_reported_in_row_order(self, validator: ImportValidator) -> None:
        rows = [make_row(sku="A", name=""), make_row(sku="B", price="-5"), make_row(sku="C", category="Toys")]

        result = validator.validate_all(rows)

        assert [(e.row, e.field) for e in result.errors] == [(1, "name"), (2, "price"), (3, "category")]

    def test_warnings_do_not_affect_validity(self, validator: ImportValidator) -> None:
        result = validator.validate_all([make_row(sku="EXISTING-1")])

        assert result.valid is True
        assert len(result.warnings) == 1

    def test_validation_is_deterministic(self, validator: ImportValidator) -> None:
        rows = [make_row(sku="A"), make_row(sku="A", price="x"), make_row(sku="EXISTING-1")]

        assert validator.validate_all(rows) == validator.validate_all(rows)

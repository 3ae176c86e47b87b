"""Dry-run validation of a bulk product import batch."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from storefront.schemas.product_import import ImportRow
from storefront.services.catalog_snapshot import CategoryRef, ExistingProductRef, category_key
from storefront.services.row_normalizer import (
    VALID_STOCK_STATUSES,
    is_blank,
    normalize_stock_status,
    parse_price,
)


@dataclass(frozen=True)
class ValidationIssue:
    """Problem found on one row; ``row`` is the 1-based batch position."""

    row: int
    field: str
    message: str


@dataclass
class ValidationResult:
    """Result of batch validation with error and warning details."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)


class ImportValidator:
    """Checks import rows against the catalog without writing anything.

    Every problem in the batch is collected so the user can fix the file in a
    single pass. Errors block the commit, warnings are informational.
    """

    def __init__(
        self,
        categories: Iterable[CategoryRef],
        existing_products: Iterable[ExistingProductRef],
    ) -> None:
        self._categories = tuple(categories)
        self._category_keys = {category_key(c.name) for c in self._categories}
        self._existing_skus = frozenset(p.sku for p in existing_products)

    def validate_row(self, row: ImportRow, row_index: int) -> list[ValidationIssue]:
        """Run the per-row checks.

        Args:
            row: Row to check
            row_index: 1-based position of the row in the batch

        Returns:
            Errors found on the row, in column order
        """
        errors: list[ValidationIssue] = []

        if is_blank(row.name):
            errors.append(ValidationIssue(row_index, "name", "Product name is required"))

        if is_blank(row.sku):
            errors.append(ValidationIssue(row_index, "sku", "SKU is required"))

        if is_blank(row.description):
            errors.append(ValidationIssue(row_index, "description", "Description is required"))

        if is_blank(row.category):
            errors.append(ValidationIssue(row_index, "category", "Category is required"))
        elif category_key(row.category) not in self._category_keys:
            available = ", ".join(c.name for c in self._categories)
            errors.append(
                ValidationIssue(
                    row_index,
                    "category",
                    f'Category "{row.category}" does not exist. Available: {available}',
                )
            )

        price = parse_price(row.price)
        if price is None or price < 0:
            errors.append(ValidationIssue(row_index, "price", "Price must be a valid non-negative number"))

        stock_status = normalize_stock_status(row.stock_status)
        if stock_status is not None and stock_status not in VALID_STOCK_STATUSES:
            errors.append(
                ValidationIssue(
                    row_index,
                    "stockStatus",
                    f"Invalid stock status. Must be one of: {', '.join(VALID_STOCK_STATUSES)}",
                )
            )

        return errors

    def validate_all(self, rows: Sequence[ImportRow]) -> ValidationResult:
        """Validate a whole batch, including duplicate and existing SKU checks."""
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        skus_in_batch: set[str] = set()

        for row_index, row in enumerate(rows, start=1):
            errors.extend(self.validate_row(row, row_index))

            if is_blank(row.sku):
                continue

            sku = row.sku.strip()
            if sku in skus_in_batch:
                errors.append(
                    ValidationIssue(row_index, "sku", f'Duplicate SKU "{sku}" found in import file')
                )
                continue
            skus_in_batch.add(sku)

            if sku in self._existing_skus:
                warnings.append(
                    ValidationIssue(row_index, "sku", f'SKU "{sku}" already exists and will be updated')
                )

        return ValidationResult(valid=not errors, errors=errors, warnings=warnings)

"""Service layer coordinating dry-run validation and commit of bulk imports."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from storefront.schemas.product_import import ImportRow
from storefront.services.catalog_snapshot import CatalogSnapshot, CategoryStore, ProductStore
from storefront.services.import_validator import ImportValidator, ValidationIssue, ValidationResult
from storefront.services.product_importer import ImportResult, MissingCategoryPolicy, ProductImporter

logger = logging.getLogger(__name__)


class BatchTooLargeError(ValueError):
    """Raised before any row is processed when a batch exceeds the row limit."""

    def __init__(self, row_count: int, max_rows: int) -> None:
        super().__init__(f"Import contains {row_count} rows, the maximum is {max_rows}")
        self.row_count = row_count
        self.max_rows = max_rows


@dataclass
class BulkImportOutcome:
    """What a validate-only or commit request produced.

    ``results`` is only set when rows were actually committed.
    """

    success: bool
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    results: ImportResult | None = None


class BulkImportService:
    """High-level service running the validate-then-commit import flow."""

    def __init__(
        self,
        category_store: CategoryStore,
        product_store: ProductStore,
        *,
        missing_category_policy: MissingCategoryPolicy = MissingCategoryPolicy.SKIP,
        max_rows: int | None = None,
    ) -> None:
        """Initialize service with explicit store handles.

        Args:
            category_store: Source of the category list
            product_store: Source of existing products and target of writes
            missing_category_policy: Passed through to the importer
            max_rows: Optional upper bound on batch size
        """
        self._category_store = category_store
        self._product_store = product_store
        self._missing_category_policy = missing_category_policy
        self._max_rows = max_rows

    def load_snapshot(self) -> CatalogSnapshot:
        """Fetch categories and products for one validate+import cycle."""
        return CatalogSnapshot.load(self._category_store, self._product_store)

    def validate(self, rows: Sequence[ImportRow], snapshot: CatalogSnapshot | None = None) -> ValidationResult:
        """Validate rows against the catalog without writing.

        Args:
            rows: Batch to check
            snapshot: Reference data to check against, loaded when omitted

        Returns:
            ValidationResult with every error and warning in the batch
        """
        if snapshot is None:
            snapshot = self.load_snapshot()
        validator = ImportValidator(snapshot.categories, snapshot.products)
        return validator.validate_all(rows)

    def run(
        self,
        rows: Sequence[ImportRow],
        *,
        update_existing: bool = True,
        validate_only: bool = False,
    ) -> BulkImportOutcome:
        """Validate a batch and, unless told not to, commit it.

        Validation always runs first against the same snapshot the importer
        uses, so a batch that fails validation never reaches the store.

        Args:
            rows: Batch to import
            update_existing: Overwrite products whose SKU already exists
            validate_only: Stop after validation (dry run)

        Returns:
            BulkImportOutcome describing validation issues and import results

        Raises:
            BatchTooLargeError: If the batch exceeds ``max_rows``
            SQLAlchemyError: If reference data cannot be loaded
        """
        if self._max_rows is not None and len(rows) > self._max_rows:
            raise BatchTooLargeError(len(rows), self._max_rows)

        snapshot = self.load_snapshot()
        validation = self.validate(rows, snapshot)
        logger.info(
            f"Validated {len(rows)} rows: {len(validation.errors)} errors, "
            f"{len(validation.warnings)} warnings"
        )

        if validate_only or not validation.valid:
            return BulkImportOutcome(
                success=validation.valid if validate_only else False,
                errors=validation.errors,
                warnings=validation.warnings,
            )

        importer = ProductImporter(
            self._product_store,
            snapshot.categories,
            snapshot.products,
            missing_category_policy=self._missing_category_policy,
        )
        results = importer.run(rows, update_existing=update_existing)
        return BulkImportOutcome(success=True, warnings=validation.warnings, results=results)

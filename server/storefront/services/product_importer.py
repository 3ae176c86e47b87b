"""Reconciliation of import rows into product creates and updates."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

from storefront.schemas.product_import import ImportRow
from storefront.services.catalog_snapshot import (
    CategoryRef,
    ExistingProductRef,
    ProductStore,
    category_key,
)
from storefront.services.row_normalizer import build_payload

logger = logging.getLogger(__name__)


class MissingCategoryPolicy(str, Enum):
    """How to treat a row whose category vanished after validation."""

    SKIP = "skip"
    FAIL = "fail"


@dataclass(frozen=True)
class RowFailure:
    row: int
    message: str


@dataclass
class ImportResult:
    """Aggregated outcome of a committed import."""

    created: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[RowFailure] = field(default_factory=list)

    def record_failure(self, row: int, message: str) -> None:
        self.failed += 1
        self.errors.append(RowFailure(row=row, message=message))


class ProductImporter:
    """Applies import rows to a product store one at a time.

    Rows are processed in batch order and independently: a failing row is
    recorded in the result and the next row is attempted. The batch is not
    atomic, rows written before a failure stay written.
    """

    def __init__(
        self,
        product_store: ProductStore,
        categories: Iterable[CategoryRef],
        existing_products: Iterable[ExistingProductRef],
        *,
        missing_category_policy: MissingCategoryPolicy = MissingCategoryPolicy.SKIP,
    ) -> None:
        """Initialize importer with a store handle and a catalog snapshot.

        Args:
            product_store: Store that persists payloads via ``save_product``
            categories: Categories known at the start of the run
            existing_products: Products known at the start of the run
            missing_category_policy: Skip or fail rows whose category is gone
        """
        self._store = product_store
        self._categories_by_key = {category_key(c.name): c for c in categories}
        self._existing_ids = {p.sku: p.id for p in existing_products}
        self._missing_category_policy = missing_category_policy

    def run(self, rows: Sequence[ImportRow], *, update_existing: bool = True) -> ImportResult:
        """Create or update a product for every row.

        Args:
            rows: Batch to import, expected to have passed validation
            update_existing: Overwrite products whose SKU already exists

        Returns:
            ImportResult with counts and per-row failure messages
        """
        result = ImportResult()
        # SKUs created during this run count as existing for later rows
        known_ids = dict(self._existing_ids)

        for row_number, row in enumerate(rows, start=1):
            try:
                self._apply_row(row, row_number, update_existing, known_ids, result)
            except Exception as e:
                logger.warning(f"Row {row_number}: import failed: {e}")
                result.record_failure(row_number, str(e) or type(e).__name__)

        logger.info(
            f"Import finished: {result.created} created, {result.updated} updated, "
            f"{result.failed} failed, {result.skipped} skipped"
        )
        return result

    def _apply_row(
        self,
        row: ImportRow,
        row_number: int,
        update_existing: bool,
        known_ids: dict[str, int],
        result: ImportResult,
    ) -> None:
        category = self._categories_by_key.get(category_key(row.category))
        if category is None:
            if self._missing_category_policy is MissingCategoryPolicy.FAIL:
                result.record_failure(row_number, f'Category "{row.category}" no longer exists')
            else:
                result.skipped += 1
                logger.warning(f'Row {row_number}: skipped, category "{row.category}" no longer exists')
            return

        existing_id = known_ids.get((row.sku or "").strip())
        payload = build_payload(row, category.id, product_id=existing_id)

        if existing_id is None:
            saved = self._store.save_product(payload)
            known_ids[payload.sku] = saved.id
            result.created += 1
        elif update_existing:
            self._store.save_product(payload)
            result.updated += 1
        else:
            result.record_failure(row_number, f"SKU {payload.sku} already exists (update mode disabled)")

"""Services module for business logic."""
from __future__ import annotations

from .bulk_import_service import BatchTooLargeError, BulkImportOutcome, BulkImportService
from .catalog_snapshot import CatalogSnapshot, CategoryRef, ExistingProductRef
from .category_repository import CategoryRepository
from .csv_row_parser import CSVFormatError, parse_csv_rows
from .import_validator import ImportValidator, ValidationIssue, ValidationResult
from .product_importer import ImportResult, MissingCategoryPolicy, ProductImporter, RowFailure
from .product_repository import ProductNotFoundError, ProductRepository

__all__ = [
    "BatchTooLargeError",
    "BulkImportOutcome",
    "BulkImportService",
    "CatalogSnapshot",
    "CategoryRef",
    "ExistingProductRef",
    "CategoryRepository",
    "CSVFormatError",
    "parse_csv_rows",
    "ImportValidator",
    "ValidationIssue",
    "ValidationResult",
    "ImportResult",
    "MissingCategoryPolicy",
    "ProductImporter",
    "RowFailure",
    "ProductNotFoundError",
    "ProductRepository",
]

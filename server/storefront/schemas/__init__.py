"""Public schema exports."""

from .product import ProductPayload
from .product_import import (
    BulkImportRequest,
    BulkImportResponse,
    ImportResultResponse,
    ImportRow,
    RowFailureResponse,
    ValidationIssueResponse,
    ValidationResponse,
)

__all__ = [
    "ProductPayload",
    "BulkImportRequest",
    "BulkImportResponse",
    "ImportResultResponse",
    "ImportRow",
    "RowFailureResponse",
    "ValidationIssueResponse",
    "ValidationResponse",
]

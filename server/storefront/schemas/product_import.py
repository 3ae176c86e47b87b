"""Pydantic schemas for bulk product import requests and reports."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.core.config import get_settings


class ImportRow(BaseModel):
    """One untrusted product candidate parsed from a spreadsheet line.

    Every column is optional here; presence and format are checked by the
    import validator so that all problems can be reported at once.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    sku: str | None = None
    price: float | str | None = None
    hide_price: Any = Field(default=None, alias="hidePrice")
    description: str | None = None
    category: str | None = None
    stock_status: str | None = Field(default=None, alias="stockStatus")
    features: str | None = None
    images: str | None = None

    @field_validator(
        "name", "sku", "description", "category", "stock_status", "features", "images", mode="before"
    )
    @classmethod
    def coerce_scalar_to_text(cls, value: Any) -> Any:
        # Spreadsheet exports turn numeric SKUs and names into numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class BulkImportRequest(BaseModel):
    """Body of a validate-only or commit request."""

    model_config = ConfigDict(populate_by_name=True)

    rows: list[ImportRow]
    update_existing: bool = Field(
        default_factory=lambda: get_settings().import_update_existing_default,
        alias="updateExisting",
    )
    validate_only: bool = Field(default=False, alias="validateOnly")


class ValidationIssueResponse(BaseModel):
    """Error or warning attached to one row and column."""

    row: int = Field(description="1-based position of the row in the batch")
    field: str
    message: str

    model_config = ConfigDict(from_attributes=True)


class RowFailureResponse(BaseModel):
    """Row that could not be written during commit."""

    row: int
    message: str

    model_config = ConfigDict(from_attributes=True)


class ImportResultResponse(BaseModel):
    """Counts and per-row failures of a committed import."""

    created: int = Field(ge=0)
    updated: int = Field(ge=0)
    failed: int = Field(ge=0)
    skipped: int = Field(default=0, ge=0, description="Rows dropped because their category disappeared")
    errors: list[RowFailureResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class ValidationResponse(BaseModel):
    """Response to a validate-only request."""

    valid: bool
    errors: list[ValidationIssueResponse] = Field(default_factory=list)
    warnings: list[ValidationIssueResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class BulkImportResponse(BaseModel):
    """Response to a commit request."""

    success: bool
    results: ImportResultResponse | None = None
    errors: list[ValidationIssueResponse] = Field(default_factory=list)
    warnings: list[ValidationIssueResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

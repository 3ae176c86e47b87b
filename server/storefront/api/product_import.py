"""Bulk product import endpoints: dry-run validation, commit and template."""
from __future__ import annotations

import logging
from typing import Sequence

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from storefront.core.config import get_settings
from storefront.core.db import get_session
from storefront.schemas.product_import import (
    BulkImportRequest,
    BulkImportResponse,
    ImportRow,
    ValidationResponse,
)
from storefront.services.bulk_import_service import BatchTooLargeError, BulkImportService
from storefront.services.category_repository import CategoryRepository
from storefront.services.csv_row_parser import CSVFormatError, build_import_template, decode_upload, parse_csv_rows
from storefront.services.product_importer import MissingCategoryPolicy
from storefront.services.product_repository import ProductRepository

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/products", tags=["products"])


def get_bulk_import_service(session: Session = Depends(get_session)) -> BulkImportService:
    """Dependency to get a BulkImportService bound to the request session."""
    return BulkImportService(
        CategoryRepository(session),
        ProductRepository(session),
        missing_category_policy=MissingCategoryPolicy(settings.import_missing_category_policy),
        max_rows=settings.import_max_rows,
    )


def _run_import(
    service: BulkImportService,
    rows: Sequence[ImportRow],
    *,
    update_existing: bool,
    validate_only: bool,
) -> JSONResponse:
    """Run the import flow and shape the response for the caller."""
    try:
        outcome = service.run(rows, update_existing=update_existing, validate_only=validate_only)

    except BatchTooLargeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    except Exception as e:
        # Row writes are isolated by the importer; snapshot load failures end up here
        logger.exception(f"Unexpected error during bulk import: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "message": str(e)},
        )

    if validate_only:
        body = ValidationResponse.model_validate(
            {"valid": outcome.success, "errors": outcome.errors, "warnings": outcome.warnings},
            from_attributes=True,
        )
        return JSONResponse(status_code=status.HTTP_200_OK, content=body.model_dump(mode="json"))

    response = BulkImportResponse.model_validate(outcome, from_attributes=True)
    if not outcome.success:
        logger.warning(f"Bulk import rejected: {len(outcome.errors)} validation errors")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode="json", include={"success", "errors", "warnings"}),
        )

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(mode="json", include={"success", "results", "warnings"}),
    )


@router.post(
    "/bulk-import",
    summary="Validate or import a batch of product rows",
    description=(
        "Validates every row against the current categories and SKUs. With validateOnly the "
        "errors and warnings are returned and nothing is written. Otherwise a batch without "
        "errors is imported row by row; rows that fail are reported without aborting the rest."
    ),
)
async def bulk_import(
    request: BulkImportRequest,
    service: BulkImportService = Depends(get_bulk_import_service),
) -> JSONResponse:
    """
    Handle a JSON bulk import request.

    Args:
        request: Rows plus updateExisting / validateOnly flags
        service: BulkImportService instance (injected)

    Returns:
        200 with errors/warnings (validate only) or results/warnings (commit),
        400 with errors/warnings when validation fails
    """
    logger.info(
        f"Bulk import request: {len(request.rows)} rows, "
        f"update_existing={request.update_existing}, validate_only={request.validate_only}"
    )
    return _run_import(
        service,
        request.rows,
        update_existing=request.update_existing,
        validate_only=request.validate_only,
    )


@router.post(
    "/bulk-import/upload",
    summary="Validate or import a product CSV file",
    description=(
        "Accepts a CSV file in the import template format, drops comment and blank lines, "
        "and runs the same validate/commit flow as the JSON endpoint."
    ),
)
async def bulk_import_upload(
    file: UploadFile = File(..., description="CSV file to import"),
    update_existing: bool = Form(default=settings.import_update_existing_default),
    validate_only: bool = Form(default=False),
    service: BulkImportService = Depends(get_bulk_import_service),
) -> JSONResponse:
    """
    Handle a CSV upload for bulk import.

    Args:
        file: Uploaded CSV file
        update_existing: Overwrite products whose SKU already exists
        validate_only: Only validate, never write
        service: BulkImportService instance (injected)

    Returns:
        Same payloads as the JSON endpoint

    Raises:
        HTTPException: 400 if the file cannot be parsed, 413 if it is too large
    """
    try:
        if not file.filename or not file.filename.lower().endswith(".csv"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Invalid file type. Expected .csv, got {file.filename}",
            )

        content = await file.read()
        file_size_mb = len(content) / (1024 * 1024)
        if file_size_mb > settings.max_upload_size_mb:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File size ({file_size_mb:.2f} MB) exceeds maximum allowed size ({settings.max_upload_size_mb} MB)",
            )

        try:
            rows = parse_csv_rows(decode_upload(content))
        except CSVFormatError as e:
            logger.warning(f"CSV parsing failed for {file.filename}: {e}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "CSV parsing failed", "errors": [str(e)]},
            )

        logger.info(f"Parsed {len(rows)} product rows from {file.filename}")
        return _run_import(service, rows, update_existing=update_existing, validate_only=validate_only)

    finally:
        await file.close()


@router.get(
    "/import-template",
    summary="Download the bulk import CSV template",
)
async def import_template() -> Response:
    """Return the CSV template with column headers, an example row and instructions."""
    return Response(
        content=build_import_template(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=product-import-template.csv"},
    )

"""CSV parsing for bulk product import uploads."""
from __future__ import annotations

import csv
import io

from pydantic import ValidationError

from storefront.schemas.product_import import ImportRow

TEMPLATE_COLUMNS = (
    "name",
    "sku",
    "price",
    "hidePrice",
    "description",
    "category",
    "stockStatus",
    "features",
    "images",
)
REQUIRED_HEADERS = {"name", "sku"}

TEMPLATE_EXAMPLE_ROW = (
    "Example Product",
    "EX-001",
    "29.99",
    "false",
    "This is a sample product description",
    "Electronics",
    "IN_STOCK",
    "Feature 1, Feature 2, Feature 3",
    "https://example.com/image1.jpg, https://example.com/image2.jpg",
)

TEMPLATE_INSTRUCTIONS = """
# Instructions:
# - name: Product name (required)
# - sku: Unique product identifier (required)
# - price: Product price as number (required)
# - hidePrice: true/false to hide price display (optional, default: false)
# - description: Full product description (required)
# - category: Category name - must match existing category (required)
# - stockStatus: IN_STOCK, LOW_STOCK, OUT_OF_STOCK, or BACKORDER (optional, default: IN_STOCK)
# - features: Comma-separated list of features (optional)
# - images: Comma-separated list of image URLs (optional)
#
# Notes:
# - If SKU already exists, the product will be UPDATED with new data
# - Use quotes around fields containing commas
# - Lines starting with # are ignored on import
"""


class CSVFormatError(ValueError):
    """Raised when an upload cannot be read as an import spreadsheet."""


def decode_upload(content: bytes) -> str:
    """Decode uploaded bytes as UTF-8, tolerating a byte order mark."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CSVFormatError(f"File encoding error: {str(e)}. File must be UTF-8 encoded") from e


def is_comment_row(row: ImportRow) -> bool:
    """Rows with no name, or a name starting with '#', are not products."""
    name = (row.name or "").strip()
    return not name or name.startswith("#")


def parse_csv_rows(text: str) -> list[ImportRow]:
    """
    Parse CSV text into import rows.

    The first line must be a header naming at least ``name`` and ``sku``.
    Unknown columns are ignored. Comment and blank lines are dropped, so row
    numbers reported later refer to product rows only.

    Args:
        text: Decoded CSV content

    Returns:
        Import rows in file order

    Raises:
        CSVFormatError: If the header is missing or the CSV is malformed
    """
    reader = csv.DictReader(io.StringIO(text), skipinitialspace=True)

    try:
        if not reader.fieldnames:
            raise CSVFormatError("CSV file is empty or has no headers")

        reader.fieldnames = [header.strip() for header in reader.fieldnames]
        headers = set(reader.fieldnames)
        missing_headers = REQUIRED_HEADERS - headers
        if missing_headers:
            raise CSVFormatError(
                f"Missing required headers: {', '.join(sorted(missing_headers))}. "
                f"Found: {', '.join(sorted(headers))}"
            )

        rows: list[ImportRow] = []
        for line in reader:
            # Surplus cells are collected under the None key
            cells = {key: value for key, value in line.items() if key is not None}
            row = ImportRow.model_validate(cells)
            if not is_comment_row(row):
                rows.append(row)
        return rows

    except csv.Error as e:
        raise CSVFormatError(f"CSV parsing error: {str(e)}") from e
    except ValidationError as e:
        raise CSVFormatError(f"CSV row could not be read: {str(e)}") from e


def build_import_template() -> str:
    """Render the downloadable CSV template: header, example row, instructions."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(TEMPLATE_COLUMNS)
    writer.writerow(TEMPLATE_EXAMPLE_ROW)
    return buffer.getvalue() + TEMPLATE_INSTRUCTIONS

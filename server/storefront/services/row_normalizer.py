"""Coercion of loosely typed spreadsheet cells into product fields.

Rows arrive from CSV uploads or JSON requests, so the same column may hold a
string, a number or a boolean. Every conversion lives here and is applied once,
when a row is turned into a :class:`ProductPayload`.
"""
from __future__ import annotations

import math
import re
from typing import Any

from storefront.models.product import StockStatus
from storefront.schemas.product import ProductPayload
from storefront.schemas.product_import import ImportRow

VALID_STOCK_STATUSES: tuple[str, ...] = tuple(status.value for status in StockStatus)

_WHITESPACE_RUN = re.compile(r"\s+")
_FEATURE_SEPARATOR = re.compile(r"[,\n]")


def is_blank(value: Any) -> bool:
    """Return True for None or text that is empty after trimming."""
    return value is None or str(value).strip() == ""


def normalize_stock_status(value: Any) -> str | None:
    """Upper-case a stock status and replace whitespace runs with underscores.

    ``" low stock "`` becomes ``"LOW_STOCK"``. Blank input yields None so the
    caller can apply its default.
    """
    if is_blank(value):
        return None
    return _WHITESPACE_RUN.sub("_", str(value).strip().upper())


def parse_price(value: Any) -> float | None:
    """Convert a price cell to a float, or None if it is not a finite number."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    if not math.isfinite(number):
        return None
    return number


def parse_hide_price(value: Any) -> bool:
    """Interpret a hidePrice cell.

    Text is true only for ``"true"`` (any case) or ``"1"``; booleans pass
    through; anything else falls back to its truthiness.
    """
    if isinstance(value, str):
        text = value.strip()
        return text.lower() == "true" or text == "1"
    if isinstance(value, bool):
        return value
    return bool(value)


def split_features(value: str | None) -> list[str]:
    """Split a feature list on commas or newlines, dropping empty entries."""
    if not value:
        return []
    return [part.strip() for part in _FEATURE_SEPARATOR.split(value) if part.strip()]


def split_images(value: str | None) -> list[str]:
    """Split a comma separated list of image URLs, dropping empty entries."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _require_text(value: str | None, field: str) -> str:
    if is_blank(value):
        msg = f"{field} is required"
        raise ValueError(msg)
    return str(value).strip()


def build_payload(row: ImportRow, category_id: int, product_id: int | None = None) -> ProductPayload:
    """Normalize an import row into the payload saved by the product store.

    Args:
        row: Untrusted row as parsed from the upload
        category_id: Identifier the row's category name resolved to
        product_id: Identifier of the product being updated, None to create

    Returns:
        ProductPayload ready for ``save_product``

    Raises:
        ValueError: If a required field is missing or the price is unusable
            (pydantic's ValidationError for an unknown stock status)
    """
    price = parse_price(row.price)
    if price is None:
        msg = f"Invalid price {row.price!r}"
        raise ValueError(msg)

    return ProductPayload(
        id=product_id,
        sku=_require_text(row.sku, "sku"),
        name=_require_text(row.name, "name"),
        price=price,
        hide_price=parse_hide_price(row.hide_price),
        description=_require_text(row.description, "description"),
        category_id=category_id,
        features=split_features(row.features),
        images=split_images(row.images),
        stock_status=normalize_stock_status(row.stock_status) or StockStatus.IN_STOCK.value,
    )

"""Read-only view of catalog reference data used by one import run."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from storefront.models.category import Category
from storefront.models.product import Product
from storefront.schemas.product import ProductPayload

logger = logging.getLogger(__name__)


class CategoryStore(Protocol):
    """Source of the current category list."""

    def get_categories(self) -> Sequence[Category]: ...


class ProductStore(Protocol):
    """Source of existing products and sink for imported ones."""

    def get_products(self) -> Sequence[Product]: ...

    def save_product(self, payload: ProductPayload) -> Product: ...


@dataclass(frozen=True)
class CategoryRef:
    id: int
    name: str


@dataclass(frozen=True)
class ExistingProductRef:
    id: int
    sku: str


def category_key(name: str | None) -> str:
    """Lookup key for case-insensitive category name matching."""
    return (name or "").strip().lower()


@dataclass(frozen=True)
class CatalogSnapshot:
    """Categories and existing products frozen at the start of an import."""

    categories: tuple[CategoryRef, ...]
    products: tuple[ExistingProductRef, ...]

    @classmethod
    def load(cls, category_store: CategoryStore, product_store: ProductStore) -> CatalogSnapshot:
        """Fetch reference data once; store errors propagate to the caller."""
        categories = tuple(CategoryRef(id=c.id, name=c.name) for c in category_store.get_categories())
        products = tuple(ExistingProductRef(id=p.id, sku=p.sku) for p in product_store.get_products())
        logger.debug(f"Loaded catalog snapshot: {len(categories)} categories, {len(products)} products")
        return cls(categories=categories, products=products)

"""ORM models exposed for external modules."""
from .base import Base
from .category import Category
from .product import Product, ProductFeature, ProductImage, StockStatus

__all__ = [
    "Base",
    "Category",
    "Product",
    "ProductFeature",
    "ProductImage",
    "StockStatus",
]

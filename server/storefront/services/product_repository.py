"""Product repository implementing the product store used by imports."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models.product import Product, ProductFeature, ProductImage
from storefront.schemas.product import ProductPayload


class ProductNotFoundError(LookupError):
    """Raised when an update targets a product id that does not exist."""

    def __init__(self, product_id: int) -> None:
        super().__init__(f"Product {product_id} not found")
        self.product_id = product_id


class ProductRepository:
    """Handles database operations for Product entities."""

    def __init__(self, session: Session) -> None:
        """Initialize repository with a SQLAlchemy session.
        
        Args:
            session: Active database session for executing queries
        """
        self._session = session

    def get_products(self) -> Sequence[Product]:
        """Fetch every product ordered by name.
        
        Returns:
            Sequence of Product instances
        """
        return self._session.query(Product).order_by(Product.name).all()

    def get_by_sku(self, sku: str) -> Product | None:
        """Fetch a product by its exact SKU.
        
        Args:
            sku: Stock keeping unit identifier
            
        Returns:
            Product instance if found, None otherwise
        """
        return self._session.query(Product).filter(Product.sku == sku).first()

    def get_by_id(self, product_id: int) -> Product | None:
        """Fetch a product by its database ID.
        
        Args:
            product_id: Database identifier
            
        Returns:
            Product instance if found, None otherwise
        """
        return self._session.get(Product, product_id)

    def save_product(self, payload: ProductPayload) -> Product:
        """Create a product, or update it when the payload carries an id.

        Features and images are replaced wholesale. Each call commits on its
        own; on a database error the session is rolled back before re-raising
        so the next save starts clean.
        
        Args:
            payload: Normalized product data
            
        Returns:
            Saved Product instance
            
        Raises:
            ProductNotFoundError: If payload.id does not match a product
            IntegrityError: If the SKU collides with another product
        """
        if payload.id is not None:
            product = self.get_by_id(payload.id)
            if product is None:
                raise ProductNotFoundError(payload.id)
        else:
            product = Product()
            self._session.add(product)

        try:
            product.sku = payload.sku
            product.name = payload.name
            product.price = payload.price
            product.hide_price = payload.hide_price
            product.description = payload.description
            product.stock_status = payload.stock_status.value
            product.category_id = payload.category_id
            product.features = [
                ProductFeature(position=position, text=text)
                for position, text in enumerate(payload.features)
            ]
            product.images = [
                ProductImage(position=position, url=url)
                for position, url in enumerate(payload.images)
            ]
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise

        self._session.refresh(product)
        return product

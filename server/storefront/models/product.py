"""Product model definition."""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, Text, false, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, PrimaryKeyType
from .category import Category


class StockStatus(str, Enum):
    """Stock states a product can be listed with."""

    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    BACKORDER = "BACKORDER"


class Product(Base):
    """Represents a catalog product that can be imported from a spreadsheet."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(PrimaryKeyType, primary_key=True, autoincrement=True)
    sku: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[float] = mapped_column(Numeric(12, 2, asdecimal=False), nullable=False)
    hide_price: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    description: Mapped[str] = mapped_column(Text, nullable=False)
    stock_status: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=StockStatus.IN_STOCK.value,
        server_default=StockStatus.IN_STOCK.value,
    )
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    category: Mapped[Category] = relationship()
    features: Mapped[list["ProductFeature"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductFeature.position",
    )
    images: Mapped[list["ProductImage"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductImage.position",
    )


class ProductFeature(Base):
    """One bullet point of a product's feature list."""

    __tablename__ = "product_features"

    id: Mapped[int] = mapped_column(PrimaryKeyType, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    product: Mapped[Product] = relationship(back_populates="features")


class ProductImage(Base):
    """Image URL attached to a product, stored in display order."""

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(PrimaryKeyType, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    product: Mapped[Product] = relationship(back_populates="images")

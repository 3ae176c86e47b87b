"""Pydantic schemas for product resources."""
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, field_validator

from storefront.models.product import StockStatus


NonEmptyStr = Annotated[str, Field(min_length=1)]


class ProductPayload(BaseModel):
    """Canonical product handed to the product store.

    ``id`` is only set when an existing product is being updated; the store
    creates a new product when it is absent.
    """

    id: int | None = Field(default=None, description="Database identifier of the product to update")
    sku: NonEmptyStr = Field(description="Unique stock keeping unit identifier")
    name: NonEmptyStr = Field(description="Display name for the product")
    price: float = Field(ge=0, description="Listed price")
    hide_price: bool = Field(default=False, description="Hide the price on the storefront")
    description: NonEmptyStr = Field(description="Marketing copy")
    category_id: int = Field(description="Identifier of the category the product is filed under")
    features: list[str] = Field(default_factory=list, description="Feature bullet points in display order")
    images: list[str] = Field(default_factory=list, description="Image URLs in display order")
    stock_status: StockStatus = Field(default=StockStatus.IN_STOCK)

    @field_validator("sku", "name", "description", mode="before")
    @classmethod
    def strip_whitespace(cls, value: str) -> str:
        if isinstance(value, str):
            value = value.strip()
        return value


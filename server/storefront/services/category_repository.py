"""Category repository implementing the category store used by imports."""
from __future__ import annotations

from typing import Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from storefront.models.category import Category


class CategoryRepository:
    """Handles database operations for Category entities."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_categories(self) -> Sequence[Category]:
        """Fetch all categories in display order."""
        return (
            self._session.query(Category)
            .order_by(Category.display_order, Category.name)
            .all()
        )

    def get_by_name(self, name: str) -> Category | None:
        """Fetch a category by name (case-insensitive)."""
        return (
            self._session.query(Category)
            .filter(func.lower(Category.name) == name.strip().lower())
            .first()
        )

    def create(self, name: str, display_order: int = 0) -> Category:
        """Create a new category.
        
        Args:
            name: Display name, unique across categories
            display_order: Position in category listings
            
        Returns:
            Created Category instance
        """
        category = Category(name=name.strip(), display_order=display_order)
        self._session.add(category)
        self._session.commit()
        self._session.refresh(category)
        return category

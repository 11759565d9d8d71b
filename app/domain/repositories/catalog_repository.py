"""
Catalog Repository Interfaces.
Categories and the products that belong to them.
"""

from typing import List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.category import Category
from app.domain.models.product import Product


class CategoryRepository(BaseRepository[Category]):
    """Interface for Category-specific operations."""

    def get_by_name(self, name: str) -> Optional[Category]:
        ...


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def list_by_category(self, category_id: int, active_only: bool = False) -> List[Product]:
        ...

"""
SQLAlchemy Implementation of the Catalog Repositories.
"""

from typing import List, Optional

from app.domain.models.category import Category
from app.domain.models.product import Product
from app.domain.repositories.catalog_repository import CategoryRepository, ProductRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCategoryRepository(SQLAlchemyRepository[Category], CategoryRepository):
    """Category repository implementation using SQLAlchemy."""

    def get_by_name(self, name: str) -> Optional[Category]:
        return self.db.query(Category).filter(Category.name == name).first()

    def list(self, skip: int = 0, limit: int = 1000) -> List[Category]:
        return self.db.query(Category).order_by(Category.name.asc()).offset(skip).limit(limit).all()


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def list_by_category(self, category_id: int, active_only: bool = False) -> List[Product]:
        query = self.db.query(Product).filter(Product.category_id == category_id)
        if active_only:
            query = query.filter(Product.is_active.is_(True))
        return query.order_by(Product.id.asc()).all()

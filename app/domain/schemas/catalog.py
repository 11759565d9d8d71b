"""Pydantic schemas for Category and Product."""

from datetime import datetime
from typing import Any, Optional

from app.domain.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    category_name: Optional[str] = None
    image_url: Optional[str] = None


class CategoryRead(CamelModel):
    id: int
    name: str
    image: str
    created_at: Optional[datetime] = None


class ProductCreate(CamelModel):
    product_name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    images: Optional[list[str]] = None
    color: Optional[str] = None
    # Shape is checked by the service so a bad value yields the same 400 as a missing one
    sizes: Optional[Any] = None
    is_active: Optional[bool] = None


class ProductRead(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    images: list[str] = []
    color: str
    sizes: list[str] = []
    is_active: bool
    category_id: int
    created_at: Optional[datetime] = None


class ProductWithCategory(ProductRead):
    category: Optional[CategoryRead] = None

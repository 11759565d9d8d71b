"""Pydantic schemas for Cart."""

from typing import Optional

from app.domain.schemas.base import CamelModel
from app.domain.schemas.catalog import ProductRead


class CartItemCreate(CamelModel):
    product_id: Optional[int] = None
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int = 1


class CartItemRead(CamelModel):
    id: int
    cart_id: int
    product_id: int
    color: str
    size: str
    quantity: int
    price: float
    product: Optional[ProductRead] = None


class CartRead(CamelModel):
    id: int
    user_id: int
    active: bool
    items: list[CartItemRead] = []
    total: float

"""Pydantic schemas for Order and the admin order actions."""

from datetime import datetime
from typing import Optional, Union

from pydantic import StrictFloat, StrictInt

from app.domain.schemas.auth import UserRead
from app.domain.schemas.base import CamelModel
from app.domain.schemas.catalog import ProductRead


class OrderItemCreate(CamelModel):
    product_id: Optional[int] = None
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int = 1


class OrderCreate(CamelModel):
    items: Optional[list[OrderItemCreate]] = None
    total: Optional[float] = None
    payment_option: Optional[str] = None


class OrderItemRead(CamelModel):
    id: int
    product_id: int
    color: Optional[str] = None
    size: Optional[str] = None
    quantity: int
    price: float
    product: Optional[ProductRead] = None


class OrderRead(CamelModel):
    id: int
    user_id: int
    total: float
    status: str
    payment_option: str
    items: list[OrderItemRead] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderWithUser(OrderRead):
    user: Optional[UserRead] = None


class ApproveOrderRequest(CamelModel):
    order_id: Optional[Union[int, list[int]]] = None
    new_status: str = "paid"


class ShipOrderRequest(CamelModel):
    order_id: Optional[int] = None


class SetCreditLimitRequest(CamelModel):
    user_id: Optional[int] = None
    credit_bal: Optional[Union[StrictInt, StrictFloat]] = None


class UpdateCreditLimitRequest(CamelModel):
    user_id: Optional[int] = None
    new_credit: Optional[Union[StrictInt, StrictFloat]] = None

"""
SQLAlchemy Implementation of Order Repository.
"""

from typing import Iterable, List

from sqlalchemy import update
from sqlalchemy.orm import selectinload

from app.domain.models.order import Order, OrderItem, OrderStatus
from app.domain.repositories.order_repository import OrderRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyOrderRepository(SQLAlchemyRepository[Order], OrderRepository):
    """Order repository implementation using SQLAlchemy."""

    def create_with_items(self, user_id: int, items: List[dict], total: float, payment_option: str) -> Order:
        order = Order(
            user_id=user_id,
            total=total,
            status=OrderStatus.PENDING.value,
            payment_option=payment_option,
            items=[OrderItem(**item) for item in items],
        )
        self.db.add(order)
        self.db.commit()
        self.db.refresh(order)
        return order

    def list_for_user(self, user_id: int) -> List[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
            .filter(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def list_pending(self) -> List[Order]:
        return (
            self.db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .filter(Order.status == OrderStatus.PENDING.value)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .all()
        )

    def update_status(self, order_ids: Iterable[int], new_status: str) -> int:
        ids = list(order_ids)
        if not ids:
            return 0
        result = self.db.execute(
            update(Order)
            .where(Order.id.in_(ids))
            .values(status=new_status)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        return result.rowcount or 0

    def mark_shipped(self, order_id: int) -> int:
        result = self.db.execute(
            update(Order)
            .where(Order.id == order_id, Order.status == OrderStatus.PAID.value)
            .values(status=OrderStatus.SHIPPED.value)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        return result.rowcount or 0

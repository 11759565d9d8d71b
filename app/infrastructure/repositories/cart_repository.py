"""
SQLAlchemy Implementation of Cart Repository.
"""

from typing import Optional

from sqlalchemy import update

from app.domain.models.cart import Cart, CartItem
from app.domain.repositories.cart_repository import CartRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCartRepository(SQLAlchemyRepository[Cart], CartRepository):
    """Cart repository implementation using SQLAlchemy."""

    def get_active_cart(self, user_id: int) -> Optional[Cart]:
        return (
            self.db.query(Cart)
            .filter(Cart.user_id == user_id, Cart.active.is_(True))
            .order_by(Cart.id.desc())
            .first()
        )

    def get_or_create_active_cart(self, user_id: int) -> Cart:
        cart = self.get_active_cart(user_id)
        if cart is None:
            cart = self.create({"user_id": user_id, "active": True})
        return cart

    def add_item(self, cart: Cart, product_id: int, color: str, size: str, quantity: int, price: float) -> CartItem:
        item = (
            self.db.query(CartItem)
            .filter(
                CartItem.cart_id == cart.id,
                CartItem.product_id == product_id,
                CartItem.color == color,
                CartItem.size == size,
            )
            .first()
        )
        if item:
            item.quantity += quantity
            item.price = price
        else:
            item = CartItem(
                cart_id=cart.id,
                product_id=product_id,
                color=color,
                size=size,
                quantity=quantity,
                price=price,
            )
            self.db.add(item)

        self.db.commit()
        self.db.refresh(item)
        self.db.refresh(cart)
        return item

    def deactivate_active_carts(self, user_id: int) -> int:
        result = self.db.execute(
            update(Cart)
            .where(Cart.user_id == user_id, Cart.active.is_(True))
            .values(active=False)
            .execution_options(synchronize_session="fetch")
        )
        self.db.commit()
        return result.rowcount or 0

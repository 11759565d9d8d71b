"""
Cart Repository Interface.
"""

from typing import Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.cart import Cart, CartItem


class CartRepository(BaseRepository[Cart]):
    """Interface for Cart-specific operations."""

    def get_active_cart(self, user_id: int) -> Optional[Cart]:
        """The user's most recent active cart, if any."""
        ...

    def get_or_create_active_cart(self, user_id: int) -> Cart:
        ...

    def add_item(self, cart: Cart, product_id: int, color: str, size: str, quantity: int, price: float) -> CartItem:
        """Add a line item, merging into an existing product+color+size line."""
        ...

    def deactivate_active_carts(self, user_id: int) -> int:
        """Mark every active cart of the user inactive; returns the count."""
        ...

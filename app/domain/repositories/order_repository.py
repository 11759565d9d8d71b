"""
Order Repository Interface.
"""

from typing import Iterable, List

from app.domain.repositories.base import BaseRepository
from app.domain.models.order import Order


class OrderRepository(BaseRepository[Order]):
    """Interface for Order-specific operations."""

    def create_with_items(self, user_id: int, items: List[dict], total: float, payment_option: str) -> Order:
        ...

    def list_for_user(self, user_id: int) -> List[Order]:
        ...

    def list_pending(self) -> List[Order]:
        """Pending orders, newest first."""
        ...

    def update_status(self, order_ids: Iterable[int], new_status: str) -> int:
        """Set the status of every listed order; returns the number updated."""
        ...

    def mark_shipped(self, order_id: int) -> int:
        """Ship the order only if it is currently paid; returns the number updated."""
        ...

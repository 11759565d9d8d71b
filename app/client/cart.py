"""Client cart store: line items keyed by product, color and size, with a derived total."""

from typing import Any, Optional

from pydantic import BaseModel

from app.client.storage import LocalStorage

CART_STORAGE_KEY = "cart-storage"


class CartLine(BaseModel):
    product_id: int
    product: Optional[dict[str, Any]] = None
    color: str
    size: str
    quantity: int
    price: float

    def matches(self, product_id: int, color: str, size: str) -> bool:
        return self.product_id == product_id and self.color == color and self.size == size


class CartStore:
    """Persisted shopping cart. Every mutation recomputes the total from the lines."""

    def __init__(self, storage: Optional[LocalStorage] = None):
        self.storage = storage or LocalStorage()
        self.items: list[CartLine] = []
        self.total: float = 0.0
        self._restore()

    def _restore(self) -> None:
        saved = self.storage.get_item(CART_STORAGE_KEY) or {}
        self.items = [CartLine.model_validate(line) for line in saved.get("items", [])]
        self._commit()

    def _commit(self) -> None:
        self.total = sum(line.price * line.quantity for line in self.items)
        self.storage.set_item(
            CART_STORAGE_KEY,
            {"items": [line.model_dump() for line in self.items], "total": self.total},
        )

    def _find(self, product_id: int, color: str, size: str) -> Optional[CartLine]:
        return next((line for line in self.items if line.matches(product_id, color, size)), None)

    def add_item(self, product: dict[str, Any], color: str, size: str, quantity: int) -> None:
        """Add a product variant; an existing product+color+size line grows instead."""
        if quantity <= 0:
            raise ValueError("Quantity must be at least 1")

        existing = self._find(product["id"], color, size)
        if existing:
            existing.quantity += quantity
        else:
            self.items.append(
                CartLine(
                    product_id=product["id"],
                    product=product,
                    color=color,
                    size=size,
                    quantity=quantity,
                    price=product["price"],
                )
            )
        self._commit()

    def remove_item(self, product_id: int, color: str, size: str) -> None:
        self.items = [line for line in self.items if not line.matches(product_id, color, size)]
        self._commit()

    def update_quantity(self, product_id: int, color: str, size: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove_item(product_id, color, size)
            return

        line = self._find(product_id, color, size)
        if line:
            line.quantity = quantity
        self._commit()

    def clear_cart(self) -> None:
        self.items = []
        self._commit()

    def item_count(self) -> int:
        return sum(line.quantity for line in self.items)

    def as_order_items(self) -> list[dict[str, Any]]:
        """Lines in the shape the orders endpoint accepts."""
        return [
            {"productId": line.product_id, "color": line.color, "size": line.size, "quantity": line.quantity}
            for line in self.items
        ]

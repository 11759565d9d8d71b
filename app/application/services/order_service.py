"""Order service: checkout and order history.

Placing an order and retiring the user's carts are two separate statements:
the order is committed first, then the carts are deactivated. A failure in
the second step is logged and does not undo the order.
"""

from typing import List

import structlog
from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import ErrorResponse
from app.domain.models.order import Order, PaymentOption
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.catalog_repository import ProductRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.schemas.order import OrderCreate

logger = structlog.get_logger(__name__)

PAYMENT_OPTIONS = [option.value for option in PaymentOption]


def _price_lines(products: ProductRepository, requested: List[dict]) -> List[dict]:
    """Resolve each requested line against the catalog, snapshotting the unit price."""
    lines = []
    for line in requested:
        if line.get("product_id") is None:
            raise ErrorResponse("Each item requires a productId", status.HTTP_400_BAD_REQUEST)
        if line.get("quantity", 0) <= 0:
            raise ErrorResponse("Item quantity must be at least 1", status.HTTP_400_BAD_REQUEST)

        product = products.get_by_id(line["product_id"])
        if not product or not product.is_active:
            raise ErrorResponse(f"Product {line['product_id']} Not Exist", status.HTTP_404_NOT_FOUND)

        lines.append(
            {
                "product_id": product.id,
                "color": line.get("color"),
                "size": line.get("size"),
                "quantity": line["quantity"],
                "price": line.get("price", product.price),
            }
        )
    return lines


def place_order(
    orders: OrderRepository,
    carts: CartRepository,
    products: ProductRepository,
    user_id: int,
    body: OrderCreate,
) -> Order:
    payment_option = body.payment_option or PaymentOption.FULL_PAYMENT.value
    if payment_option not in PAYMENT_OPTIONS:
        raise ErrorResponse("Invalid payment option", status.HTTP_400_BAD_REQUEST)

    if body.items is not None:
        requested = [item.model_dump() for item in body.items]
    else:
        # Items omitted: check out the active cart with its price snapshots
        cart = carts.get_active_cart(user_id)
        requested = [
            {
                "product_id": item.product_id,
                "color": item.color,
                "size": item.size,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in (cart.items if cart else [])
        ]

    if not requested:
        raise ErrorResponse("No items to order", status.HTTP_400_BAD_REQUEST)

    lines = _price_lines(products, requested)
    total = round(sum(line["price"] * line["quantity"] for line in lines), 2)
    if body.total is not None and abs(body.total - total) > 0.01:
        logger.warning("Client total differs from computed total", client_total=body.total, total=total)

    order = orders.create_with_items(user_id, lines, total, payment_option)
    logger.info("Order placed", order_id=order.id, user_id=user_id, total=total)

    try:
        deactivated = carts.deactivate_active_carts(user_id)
    except SQLAlchemyError:
        logger.exception("Cart deactivation failed after order placement", order_id=order.id, user_id=user_id)
    else:
        logger.info("Carts deactivated", user_id=user_id, count=deactivated)

    return order


def list_orders(orders: OrderRepository, user_id: int) -> List[Order]:
    return orders.list_for_user(user_id)

"""Cart service: the caller's single active cart."""

from typing import Optional

import structlog
from fastapi import status

from app.core.exceptions import ErrorResponse, validate_required_fields
from app.domain.models.cart import Cart, CartItem
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.catalog_repository import ProductRepository
from app.domain.schemas.cart import CartItemCreate

logger = structlog.get_logger(__name__)


def add_to_cart(
    carts: CartRepository,
    products: ProductRepository,
    user_id: int,
    body: CartItemCreate,
) -> CartItem:
    validate_required_fields(
        {"productId": body.product_id, "color": body.color, "size": body.size},
        ["productId", "color", "size"],
    )
    if body.quantity <= 0:
        raise ErrorResponse("Quantity must be at least 1", status.HTTP_400_BAD_REQUEST)

    product = products.get_by_id(body.product_id)
    if not product or not product.is_active:
        raise ErrorResponse("Product Not Exist", status.HTTP_404_NOT_FOUND)
    if body.size not in (product.sizes or []):
        raise ErrorResponse(f"Size '{body.size}' is not available for this product", status.HTTP_400_BAD_REQUEST)

    cart = carts.get_or_create_active_cart(user_id)
    item = carts.add_item(
        cart,
        product_id=product.id,
        color=body.color,
        size=body.size,
        quantity=body.quantity,
        price=product.price,
    )
    logger.info("Cart item added", cart_id=cart.id, product_id=product.id, quantity=item.quantity)
    return item


def get_cart(carts: CartRepository, user_id: int) -> Optional[Cart]:
    return carts.get_active_cart(user_id)

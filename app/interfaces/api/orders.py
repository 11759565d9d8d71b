"""Order API routes: mounted at /orders, outside the /api/v1 prefix."""

from fastapi import APIRouter, Depends, status

from app.application.services import order_service
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.catalog_repository import ProductRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.schemas.auth import AuthenticatedUser
from app.domain.schemas.order import OrderCreate, OrderRead
from app.interfaces.api.deps import authenticate_token
from app.interfaces.deps import get_cart_repository, get_order_repository, get_product_repository

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.post("", status_code=status.HTTP_201_CREATED)
def place_order(
    body: OrderCreate,
    orders: OrderRepository = Depends(get_order_repository),
    carts: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
    user: AuthenticatedUser = Depends(authenticate_token),
):
    order = order_service.place_order(orders, carts, products, user.id, body)
    return {
        "success": True,
        "message": "Order placed successfully",
        "order": OrderRead.model_validate(order),
    }


@router.get("")
def list_orders(
    orders: OrderRepository = Depends(get_order_repository),
    user: AuthenticatedUser = Depends(authenticate_token),
):
    return {
        "success": True,
        "message": "Orders retrieved successfully",
        "orders": [OrderRead.model_validate(o) for o in order_service.list_orders(orders, user.id)],
    }

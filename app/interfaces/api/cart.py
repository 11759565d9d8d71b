"""Cart API routes: mounted at /cart, outside the /api/v1 prefix."""

from fastapi import APIRouter, Depends, status

from app.application.services import cart_service
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.catalog_repository import ProductRepository
from app.domain.schemas.auth import AuthenticatedUser
from app.domain.schemas.cart import CartItemCreate, CartItemRead, CartRead
from app.interfaces.api.deps import authenticate_token
from app.interfaces.deps import get_cart_repository, get_product_repository

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_cart(
    body: CartItemCreate,
    carts: CartRepository = Depends(get_cart_repository),
    products: ProductRepository = Depends(get_product_repository),
    user: AuthenticatedUser = Depends(authenticate_token),
):
    item = cart_service.add_to_cart(carts, products, user.id, body)
    return {
        "success": True,
        "message": "Item added to cart successfully",
        "item": CartItemRead.model_validate(item),
    }


@router.get("")
def get_cart(
    carts: CartRepository = Depends(get_cart_repository),
    user: AuthenticatedUser = Depends(authenticate_token),
):
    cart = cart_service.get_cart(carts, user.id)
    return {
        "success": True,
        "message": "Cart retrieved successfully",
        "cart": CartRead.model_validate(cart) if cart else None,
    }

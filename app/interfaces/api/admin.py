"""Admin API routes: KYC, catalog management, order workflow and credit limits."""

from typing import Optional

from fastapi import APIRouter, Depends, status

from app.application.services import admin_service, catalog_service
from app.domain.repositories.catalog_repository import CategoryRepository, ProductRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import UserCredit, UserRead
from app.domain.schemas.catalog import CategoryCreate, CategoryRead, ProductCreate, ProductWithCategory
from app.domain.schemas.order import (
    ApproveOrderRequest,
    OrderWithUser,
    SetCreditLimitRequest,
    ShipOrderRequest,
    UpdateCreditLimitRequest,
)
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import (
    get_category_repository,
    get_order_repository,
    get_product_repository,
    get_user_repository,
)

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/unverified-users")
def unverified_users(users: UserRepository = Depends(get_user_repository)):
    return {
        "success": True,
        "users": [UserRead.model_validate(u) for u in admin_service.get_unverified_users(users)],
    }


@router.patch("/verifyUser")
def verify_user(userId: Optional[int] = None, users: UserRepository = Depends(get_user_repository)):
    user = admin_service.verify_user(users, userId)
    return {
        "success": True,
        "message": "User verified successfully",
        "user": UserRead.model_validate(user),
    }


@router.post("/create-category", status_code=status.HTTP_201_CREATED)
def create_category(body: CategoryCreate, categories: CategoryRepository = Depends(get_category_repository)):
    category = catalog_service.create_category(categories, body)
    return {
        "success": True,
        "message": "Category Created",
        "category": CategoryRead.model_validate(category),
    }


@router.post("/create-product", status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    categoryId: Optional[int] = None,
    categories: CategoryRepository = Depends(get_category_repository),
    products: ProductRepository = Depends(get_product_repository),
):
    product = catalog_service.create_product(categories, products, categoryId, body)
    return {
        "success": True,
        "message": "Product Created",
        "product": ProductWithCategory.model_validate(product),
    }


@router.get("/orders/pending")
def pending_orders(orders: OrderRepository = Depends(get_order_repository)):
    return {
        "success": True,
        "message": "Pending orders retrieved successfully",
        "pendingOrders": [OrderWithUser.model_validate(o) for o in admin_service.get_pending_orders(orders)],
    }


@router.post("/orders/approve")
def approve_order(body: ApproveOrderRequest, orders: OrderRepository = Depends(get_order_repository)):
    updated = admin_service.approve_orders(orders, body.order_id, body.new_status)
    return {
        "success": True,
        "message": "Orders approved successfully",
        "updatedCount": updated,
    }


@router.post("/orders/shipped")
def mark_order_shipped(body: ShipOrderRequest, orders: OrderRepository = Depends(get_order_repository)):
    updated = admin_service.mark_order_shipped(orders, body.order_id)
    return {
        "success": True,
        "message": "Order marked as shipped successfully",
        "updatedCount": updated,
    }


@router.post("/set-credit-limit")
def set_credit_limit(body: SetCreditLimitRequest, users: UserRepository = Depends(get_user_repository)):
    user = admin_service.set_credit_limit(users, body.user_id, body.credit_bal, "creditBal")
    return {
        "success": True,
        "message": "Credit limit updated successfully.",
        "user": UserCredit.model_validate(user),
    }


@router.post("/update-credit-limit")
def update_credit_limit(body: UpdateCreditLimitRequest, users: UserRepository = Depends(get_user_repository)):
    user = admin_service.set_credit_limit(users, body.user_id, body.new_credit, "newCredit")
    return {
        "success": True,
        "message": "Credit limit updated successfully",
        "user": UserRead.model_validate(user),
    }

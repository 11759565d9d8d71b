"""Admin service: KYC verification, order workflow and credit limits."""

from typing import List, Optional, Union

import structlog
from fastapi import status

from app.core.exceptions import ErrorResponse
from app.domain.models.order import Order, OrderStatus
from app.domain.models.user import User
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)

ORDER_STATUSES = [s.value for s in OrderStatus]


def _get_user_or_404(repo: UserRepository, user_id: Optional[int]) -> User:
    user = repo.get_by_id(user_id) if user_id is not None else None
    if not user:
        raise ErrorResponse("User not found", status.HTTP_404_NOT_FOUND)
    return user


def get_unverified_users(repo: UserRepository) -> List[User]:
    return repo.list_unverified()


def verify_user(repo: UserRepository, user_id: Optional[int]) -> User:
    if user_id is None:
        raise ErrorResponse("userId is required", status.HTTP_400_BAD_REQUEST)
    user = _get_user_or_404(repo, user_id)
    user = repo.set_verified(user)
    logger.info("User verified", user_id=user.id)
    return user


def get_pending_orders(repo: OrderRepository) -> List[Order]:
    return repo.list_pending()


def approve_orders(repo: OrderRepository, order_id: Union[int, List[int], None], new_status: str) -> int:
    if order_id is None or order_id == []:
        raise ErrorResponse("No order IDs provided", status.HTTP_400_BAD_REQUEST)
    if new_status not in ORDER_STATUSES:
        raise ErrorResponse(
            f"Invalid status. Allowed: {', '.join(ORDER_STATUSES)}",
            status.HTTP_400_BAD_REQUEST,
        )

    ids = order_id if isinstance(order_id, list) else [order_id]
    updated = repo.update_status(ids, new_status)
    logger.info("Orders status updated", order_ids=ids, status=new_status, updated=updated)
    return updated


def mark_order_shipped(repo: OrderRepository, order_id: Optional[int]) -> int:
    if order_id is None:
        raise ErrorResponse("orderId is required", status.HTTP_400_BAD_REQUEST)

    updated = repo.mark_shipped(order_id)
    if updated == 0:
        raise ErrorResponse("No matching 'paid' order found with this ID", status.HTTP_404_NOT_FOUND)

    logger.info("Order shipped", order_id=order_id)
    return updated


def set_credit_limit(repo: UserRepository, user_id: Optional[int], amount, field_name: str) -> User:
    """Overwrite a user's credit balance; field_name names the amount field in error messages."""
    if user_id is None or amount is None:
        raise ErrorResponse(f"userId and {field_name} (number) are required.", status.HTTP_400_BAD_REQUEST)

    user = _get_user_or_404(repo, user_id)
    user = repo.set_credit_balance(user, amount)
    logger.info("Credit limit set", user_id=user.id, credit_bal=user.credit_bal)
    return user

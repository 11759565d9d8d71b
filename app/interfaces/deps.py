"""
API Dependencies: repository providers bound to the request's session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.infrastructure.database import get_db
from app.domain.models.cart import Cart
from app.domain.models.category import Category
from app.domain.models.order import Order
from app.domain.models.product import Product
from app.domain.models.user import User
from app.domain.repositories.cart_repository import CartRepository
from app.domain.repositories.catalog_repository import CategoryRepository, ProductRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.used_token_repository import UsedTokenRepository
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.repositories.cart_repository import SQLAlchemyCartRepository
from app.infrastructure.repositories.catalog_repository import (
    SQLAlchemyCategoryRepository,
    SQLAlchemyProductRepository,
)
from app.infrastructure.repositories.order_repository import SQLAlchemyOrderRepository
from app.infrastructure.repositories.used_token_repository import SQLAlchemyUsedTokenRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return SQLAlchemyUserRepository(db, User)


def get_used_token_repository(db: Session = Depends(get_db)) -> UsedTokenRepository:
    return SQLAlchemyUsedTokenRepository(db)


def get_category_repository(db: Session = Depends(get_db)) -> CategoryRepository:
    return SQLAlchemyCategoryRepository(db, Category)


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    return SQLAlchemyProductRepository(db, Product)


def get_cart_repository(db: Session = Depends(get_db)) -> CartRepository:
    return SQLAlchemyCartRepository(db, Cart)


def get_order_repository(db: Session = Depends(get_db)) -> OrderRepository:
    return SQLAlchemyOrderRepository(db, Order)

"""Catalog service: categories and products."""

from typing import List, Optional

import structlog
from fastapi import status

from app.core.exceptions import ErrorResponse, validate_required_fields
from app.domain.models.category import Category
from app.domain.models.product import Product
from app.domain.repositories.catalog_repository import CategoryRepository, ProductRepository
from app.domain.schemas.catalog import CategoryCreate, ProductCreate

logger = structlog.get_logger(__name__)


def list_categories(repo: CategoryRepository) -> List[Category]:
    return repo.list()


def create_category(repo: CategoryRepository, body: CategoryCreate) -> Category:
    if not body.category_name or not body.image_url:
        raise ErrorResponse("Category Name and image is required", status.HTTP_400_BAD_REQUEST)

    if repo.get_by_name(body.category_name):
        raise ErrorResponse("Category Already Exist", status.HTTP_409_CONFLICT)

    category = repo.create({"name": body.category_name, "image": body.image_url})
    logger.info("Category created", category_id=category.id, name=category.name)
    return category


def _get_category_or_404(repo: CategoryRepository, category_id: Optional[int]) -> Category:
    category = repo.get_by_id(category_id) if category_id is not None else None
    if not category:
        raise ErrorResponse("Category not found", status.HTTP_404_NOT_FOUND)
    return category


def list_products_of_category(
    categories: CategoryRepository,
    products: ProductRepository,
    category_id: Optional[int],
    include_inactive: bool = False,
) -> List[Product]:
    category = _get_category_or_404(categories, category_id)
    return products.list_by_category(category.id, active_only=not include_inactive)


def get_product(products: ProductRepository, product_id: Optional[int]) -> Product:
    if product_id is None:
        raise ErrorResponse("Product Id required", status.HTTP_400_BAD_REQUEST)

    product = products.get_by_id(product_id)
    if not product:
        raise ErrorResponse("Product Not Exist", status.HTTP_404_NOT_FOUND)
    return product


def create_product(
    categories: CategoryRepository,
    products: ProductRepository,
    category_id: Optional[int],
    body: ProductCreate,
) -> Product:
    validate_required_fields(
        {
            "productName": body.product_name,
            # Zero is a valid price; only an absent one is missing
            "price": body.price is not None,
            "color": body.color,
            "sizes": body.sizes,
            "categoryId": category_id,
        },
        ["productName", "price", "color", "sizes", "categoryId"],
    )

    sizes = body.sizes
    if not isinstance(sizes, list) or not sizes or not all(isinstance(s, str) and s for s in sizes):
        raise ErrorResponse("Sizes must be a non-empty array of strings", status.HTTP_400_BAD_REQUEST)
    if body.price < 0:
        raise ErrorResponse("Price must not be negative", status.HTTP_400_BAD_REQUEST)

    category = _get_category_or_404(categories, category_id)

    product = products.create(
        {
            "name": body.product_name,
            "description": body.description,
            "price": float(body.price),
            "images": body.images or [],
            "color": body.color,
            "sizes": sizes,
            "is_active": True if body.is_active is None else body.is_active,
            "category_id": category.id,
        }
    )
    logger.info("Product created", product_id=product.id, category_id=category.id)
    return product

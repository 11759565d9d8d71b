"""Category API routes: public catalog browsing."""

from typing import Optional

from fastapi import APIRouter, Depends

from app.application.services import catalog_service
from app.domain.models.user import ROLE_ADMIN
from app.domain.repositories.catalog_repository import CategoryRepository, ProductRepository
from app.domain.schemas.auth import AuthenticatedUser
from app.domain.schemas.catalog import CategoryRead, ProductRead, ProductWithCategory
from app.interfaces.api.deps import optional_auth
from app.interfaces.deps import get_category_repository, get_product_repository

router = APIRouter(prefix="/api/v1/category", tags=["Category"])


# Path spelling kept for existing clients
@router.get("/getCatergory")
def list_categories(categories: CategoryRepository = Depends(get_category_repository)):
    return {
        "success": True,
        "message": "Categories Fetched",
        "categories": [CategoryRead.model_validate(c) for c in catalog_service.list_categories(categories)],
    }


@router.get("/products-by-category")
def products_by_category(
    categoryId: Optional[int] = None,
    categories: CategoryRepository = Depends(get_category_repository),
    products: ProductRepository = Depends(get_product_repository),
    user: Optional[AuthenticatedUser] = Depends(optional_auth),
):
    include_inactive = user is not None and user.role == ROLE_ADMIN
    items = catalog_service.list_products_of_category(categories, products, categoryId, include_inactive)
    return {
        "success": True,
        "message": "Products Retrieved",
        "products": [ProductRead.model_validate(p) for p in items],
    }


@router.get("/getProduct")
def get_product(
    productId: Optional[int] = None,
    products: ProductRepository = Depends(get_product_repository),
):
    product = catalog_service.get_product(products, productId)
    return {
        "success": True,
        "message": "Product Retrieved",
        "product": ProductWithCategory.model_validate(product),
    }

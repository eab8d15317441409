"""
Product API endpoints following FastAPI best practices
Storefront listing and details, plus admin catalog management
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status

from storefront.core.errors import ErrorResponseModel
from storefront.dependencies.auth import require_admin
from storefront.dependencies.services import get_product_service
from storefront.models.user import User
from storefront.schemas.product import (
    MessageResponse,
    ProductCreate,
    ProductResponse,
    ProductsResponse,
    ProductUpdate,
)
from storefront.services.product import ProductService
from storefront.utils.query_features import parse_query_items

router = APIRouter()


def get_query_mapping(request: Request) -> Dict[str, Any]:
    """Decode the raw query string, keeping bracket notation (price[gte]=100)"""
    return parse_query_items(request.query_params.multi_items())


@router.get(
    "/products",
    responses={400: {"model": ErrorResponseModel}},
    tags=["products"],
)
async def get_all_products(
    query: Dict[str, Any] = Depends(get_query_mapping),
    service: ProductService = Depends(get_product_service),
):
    """
    List products with search, filters and pagination.

    - keyword: case-insensitive substring of the product name
    - page / limit: page number (default 1) and page size (default 8)
    - category=Books, price[gte]=100&price[lte]=500, rating[gte]=4, stock[gt]=0
    """
    return await service.list_products(query)


@router.get(
    "/product/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponseModel}},
    tags=["products"],
)
async def get_product_details(
    product_id: str,
    service: ProductService = Depends(get_product_service),
):
    product = await service.get_product(product_id)
    return ProductResponse(product=product)


@router.get(
    "/admin/products",
    response_model=ProductsResponse,
    tags=["admin"],
)
async def get_admin_products(
    service: ProductService = Depends(get_product_service),
    user: User = Depends(require_admin),
):
    """All products without pagination, for the admin dashboard."""
    products = await service.get_admin_products()
    return ProductsResponse(products=products)


@router.post(
    "/admin/product/new",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponseModel}, 403: {"model": ErrorResponseModel}},
    tags=["admin"],
)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
    user: User = Depends(require_admin),
):
    created = await service.create_product(product, created_by=user.id)
    return ProductResponse(product=created)


@router.put(
    "/admin/product/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponseModel}},
    tags=["admin"],
)
async def update_product(
    product_id: str,
    product: ProductUpdate,
    service: ProductService = Depends(get_product_service),
    user: User = Depends(require_admin),
):
    """Update a product; only fields present in the body change."""
    updated = await service.update_product(product_id, product)
    return ProductResponse(product=updated)


@router.delete(
    "/admin/product/{product_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponseModel}},
    tags=["admin"],
)
async def delete_product(
    product_id: str,
    service: ProductService = Depends(get_product_service),
    user: User = Depends(require_admin),
):
    await service.delete_product(product_id)
    return MessageResponse(message="Product Deleted Successfully")

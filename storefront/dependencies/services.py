"""
Dependency injection for catalog services and repositories
"""

from fastapi import Depends

from storefront.db.mongodb import get_order_collection, get_product_collection, get_user_collection
from storefront.repositories.order import OrderRepository
from storefront.repositories.product import ProductRepository
from storefront.repositories.user import UserRepository
from storefront.services.order import OrderService
from storefront.services.product import ProductService
from storefront.services.review import ReviewService
from storefront.services.user import UserService


async def get_product_repository() -> ProductRepository:
    """Get product repository instance"""
    collection = await get_product_collection()
    return ProductRepository(collection)


async def get_order_repository() -> OrderRepository:
    collection = await get_order_collection()
    return OrderRepository(collection)


async def get_product_service(
    repository: ProductRepository = Depends(get_product_repository)
) -> ProductService:
    """Get product service instance"""
    return ProductService(repository)


async def get_review_service(
    repository: ProductRepository = Depends(get_product_repository)
) -> ReviewService:
    return ReviewService(repository)


async def get_order_service(
    repository: OrderRepository = Depends(get_order_repository),
    product_repository: ProductRepository = Depends(get_product_repository),
) -> OrderService:
    return OrderService(repository, product_repository)


async def get_user_repository() -> UserRepository:
    collection = await get_user_collection()
    return UserRepository(collection)


async def get_user_service(
    repository: UserRepository = Depends(get_user_repository)
) -> UserService:
    return UserService(repository)

"""
Product service containing business logic layer
"""

from typing import Any, Dict, List, Mapping

from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.product import Product
from storefront.repositories.product import ProductRepository
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.utils.query_features import parse_positive_int, scalar_param


class ProductService:
    """Service layer for product business logic"""

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    async def create_product(self, product_data: ProductCreate, created_by: str) -> Product:
        product = await self.repository.create(product_data, created_by)

        logger.info(
            f"Created product {product.id}",
            user_id=created_by,
            metadata={"event": "create_product", "product_id": product.id}
        )
        return product

    async def get_product(self, product_id: str) -> Product:
        product = await self.repository.get_by_id(product_id)
        if not product:
            raise ErrorResponse("Product not found", status_code=404)
        return product

    async def update_product(self, product_id: str, product_data: ProductUpdate) -> Product:
        product = await self.repository.update(product_id, product_data)
        if not product:
            raise ErrorResponse("Product not found", status_code=404)

        logger.info(
            f"Updated product {product_id}",
            metadata={
                "event": "update_product",
                "product_id": product_id,
                "fields": sorted(product_data.model_dump(exclude_unset=True)),
            }
        )
        return product

    async def delete_product(self, product_id: str) -> None:
        if not await self.repository.delete(product_id):
            raise ErrorResponse("Product not found", status_code=404)

        logger.info(
            f"Deleted product {product_id}",
            metadata={"event": "delete_product", "product_id": product_id}
        )

    async def get_admin_products(self) -> List[Product]:
        return await self.repository.list_all()

    async def list_products(self, query_params: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Storefront listing: keyword search, field filters and pagination.

        Args:
            query_params: decoded query string (see parse_query_items)

        Returns:
            Listing envelope with the page of products and three counts:
            every product, products matching search+filter, and page size used.
        """
        requested = parse_positive_int(scalar_param(query_params, "limit"))
        result_per_page = min(requested or config.default_page_size, config.max_page_size)

        products, products_count, filtered_products_count = await self.repository.list_page(
            query_params, result_per_page
        )

        logger.info(
            f"Fetched {len(products)} products",
            metadata={
                "event": "list_products",
                "count": len(products),
                "total": products_count,
                "filtered": filtered_products_count,
                "result_per_page": result_per_page,
            }
        )

        return {
            "success": True,
            "products": [p.model_dump(mode="json") for p in products],
            "productsCount": products_count,
            "resultPerPage": result_per_page,
            "filteredProductsCount": filtered_products_count,
        }

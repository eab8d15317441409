"""
Product repository for data access layer following Repository pattern
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import OperationFailure, PyMongoError

from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.product import Product
from storefront.schemas.product import ProductCreate, ProductUpdate
from storefront.utils.query_features import QueryComposer


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id string, returning None when it is not a valid ObjectId"""
    if isinstance(value, ObjectId):
        return value
    if value is None or not ObjectId.is_valid(str(value)):
        return None
    return ObjectId(str(value))


class ProductRepository:
    """Repository for product data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_product(self, doc: dict) -> Optional[Product]:
        """Convert MongoDB document to Product model"""
        if not doc:
            return None

        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        doc["reviews"] = [
            {**review, "id": str(review.get("_id", "")), "user": str(review.get("user", ""))}
            for review in doc.get("reviews", [])
        ]
        if doc.get("user") is not None:
            doc["user"] = str(doc["user"])

        return Product(**doc)

    async def create(self, product_data: ProductCreate, created_by: str) -> Product:
        """Create a new product with empty review data"""
        try:
            now = datetime.now(timezone.utc)
            doc = product_data.model_dump()
            doc.update({
                "rating": 0.0,
                "review_count": 0,
                "reviews": [],
                "user": created_by,
                "version": 0,
                "created_at": now,
                "updated_at": now,
            })

            result = await self.collection.insert_one(doc)
            doc["_id"] = result.inserted_id
            return self._doc_to_product(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error creating product: {e}", error=e)
            raise ErrorResponse("Database error during product creation", status_code=503)

    async def find_document(self, product_id: str) -> Optional[dict]:
        """Get the raw product document, or None for unknown/invalid ids"""
        obj_id = to_object_id(product_id)
        if obj_id is None:
            return None

        try:
            return await self.collection.find_one({"_id": obj_id})
        except PyMongoError as e:
            logger.error(f"MongoDB error getting product: {e}", error=e)
            raise ErrorResponse("Database error during product retrieval", status_code=503)

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        doc = await self.find_document(product_id)
        return self._doc_to_product(doc) if doc else None

    async def update(self, product_id: str, product_data: ProductUpdate) -> Optional[Product]:
        """Update only the fields that were set on the request"""
        obj_id = to_object_id(product_id)
        if obj_id is None:
            return None

        try:
            update_data = product_data.model_dump(exclude_unset=True)
            if not update_data:
                return await self.get_by_id(product_id)

            update_data["updated_at"] = datetime.now(timezone.utc)
            doc = await self.collection.find_one_and_update(
                {"_id": obj_id},
                {"$set": update_data},
                return_document=ReturnDocument.AFTER,
            )
            return self._doc_to_product(doc) if doc else None

        except PyMongoError as e:
            logger.error(f"MongoDB error updating product: {e}", error=e)
            raise ErrorResponse("Database error during product update", status_code=503)

    async def delete(self, product_id: str) -> bool:
        obj_id = to_object_id(product_id)
        if obj_id is None:
            return False

        try:
            result = await self.collection.delete_one({"_id": obj_id})
            return result.deleted_count > 0
        except PyMongoError as e:
            logger.error(f"MongoDB error deleting product: {e}", error=e)
            raise ErrorResponse("Database error during product deletion", status_code=503)

    async def list_all(self) -> List[Product]:
        """All products, unpaginated (admin dashboard)"""
        try:
            docs = await self.collection.find({}).to_list(length=None)
            return [self._doc_to_product(doc) for doc in docs]
        except PyMongoError as e:
            logger.error(f"MongoDB error listing products: {e}", error=e)
            raise ErrorResponse("Database error during product listing", status_code=503)

    async def list_page(
        self, query_params: Mapping[str, Any], result_per_page: int
    ) -> Tuple[List[Product], int, int]:
        """
        Search, filter and paginate products.

        Returns:
            (page of products, total product count, count after search and filter)
        """
        features = (
            QueryComposer(self.collection, query_params)
            .search()
            .filter()
            .pagination(result_per_page)
        )

        try:
            products_count = await self.collection.count_documents({})
            filtered_products_count = await features.count()
            docs = await features.execute()

        except OperationFailure as e:
            # Store rejected the filter shape; the client sent it, not us
            logger.warning(
                f"Rejected product filter: {e}",
                metadata={"event": "invalid_filter_query", "conditions": str(features.conditions)}
            )
            raise ErrorResponse("Invalid filter query", status_code=400)
        except PyMongoError as e:
            logger.error(f"MongoDB error listing products: {e}", error=e)
            raise ErrorResponse("Database error during product listing", status_code=503)

        products = [self._doc_to_product(doc) for doc in docs]
        return products, products_count, filtered_products_count

    async def save_reviews(
        self,
        product_id: ObjectId,
        expected_version: Optional[int],
        reviews: List[Dict[str, Any]],
        rating: float,
        review_count: int,
    ) -> bool:
        """
        Write reviews and their derived fields in one version-checked update.

        Returns False when the product changed since it was read (or no
        longer exists); the caller decides whether to retry.
        """
        version_match = {"$exists": False} if expected_version is None else expected_version

        try:
            result = await self.collection.update_one(
                {"_id": product_id, "version": version_match},
                {
                    "$set": {
                        "reviews": reviews,
                        "rating": rating,
                        "review_count": review_count,
                        "updated_at": datetime.now(timezone.utc),
                    },
                    "$inc": {"version": 1},
                },
            )
            return result.matched_count > 0
        except PyMongoError as e:
            logger.error(f"MongoDB error saving reviews: {e}", error=e)
            raise ErrorResponse("Database error during review update", status_code=503)

    async def find_missing(self, product_ids: List[str]) -> List[str]:
        """Ids from product_ids that match no product (invalid ids included)"""
        obj_ids = [obj_id for obj_id in map(to_object_id, product_ids) if obj_id is not None]

        try:
            docs = await self.collection.find(
                {"_id": {"$in": obj_ids}}, {"_id": 1}
            ).to_list(length=None)
        except PyMongoError as e:
            logger.error(f"MongoDB error checking products: {e}", error=e)
            raise ErrorResponse("Database error during product lookup", status_code=503)

        found = {str(doc["_id"]) for doc in docs}
        return [product_id for product_id in product_ids if str(to_object_id(product_id)) not in found]

    async def decrement_stock(self, product_id: str, quantity: int) -> bool:
        """Take quantity units out of stock; False if the product does not exist"""
        obj_id = to_object_id(product_id)
        if obj_id is None:
            return False

        try:
            result = await self.collection.update_one(
                {"_id": obj_id},
                {
                    "$inc": {"stock": -quantity},
                    "$set": {"updated_at": datetime.now(timezone.utc)},
                },
            )
            return result.matched_count > 0
        except PyMongoError as e:
            logger.error(f"MongoDB error updating stock: {e}", error=e)
            raise ErrorResponse("Database error during stock update", status_code=503)

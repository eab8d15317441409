"""
Order repository for data access layer following Repository pattern
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.order import Order
from storefront.repositories.product import to_object_id
from storefront.schemas.order import OrderCreate


class OrderRepository:
    """Repository for order data access operations"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_order(self, doc: dict) -> Optional[Order]:
        if not doc:
            return None

        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        doc["user"] = str(doc.get("user", ""))
        return Order(**doc)

    async def create(self, order_data: OrderCreate, user_id: str) -> Order:
        try:
            now = datetime.now(timezone.utc)
            doc = order_data.model_dump(mode="json")
            doc.update({
                "user": user_id,
                "paid_at": now,
                "order_status": "Processing",
                "created_at": now,
            })

            result = await self.collection.insert_one(doc)
            doc["_id"] = result.inserted_id
            return self._doc_to_order(doc)

        except PyMongoError as e:
            logger.error(f"MongoDB error creating order: {e}", error=e)
            raise ErrorResponse("Database error during order creation", status_code=503)

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        obj_id = to_object_id(order_id)
        if obj_id is None:
            return None

        try:
            doc = await self.collection.find_one({"_id": obj_id})
            return self._doc_to_order(doc)
        except PyMongoError as e:
            logger.error(f"MongoDB error getting order: {e}", error=e)
            raise ErrorResponse("Database error during order retrieval", status_code=503)

    async def find(self, query: Dict[str, Any]) -> List[Order]:
        try:
            docs = await self.collection.find(query).to_list(length=None)
            return [self._doc_to_order(doc) for doc in docs]
        except PyMongoError as e:
            logger.error(f"MongoDB error listing orders: {e}", error=e)
            raise ErrorResponse("Database error during order listing", status_code=503)

    async def list_by_user(self, user_id: str) -> List[Order]:
        return await self.find({"user": user_id})

    async def list_all(self) -> List[Order]:
        return await self.find({})

    async def set_status(
        self, order_id: str, status: str, delivered_at: Optional[datetime] = None
    ) -> Optional[Order]:
        obj_id = to_object_id(order_id)
        if obj_id is None:
            return None

        update: Dict[str, Any] = {"order_status": status}
        if delivered_at is not None:
            update["delivered_at"] = delivered_at

        try:
            doc = await self.collection.find_one_and_update(
                {"_id": obj_id},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
            return self._doc_to_order(doc)
        except PyMongoError as e:
            logger.error(f"MongoDB error updating order: {e}", error=e)
            raise ErrorResponse("Database error during order update", status_code=503)

    async def delete(self, order_id: str) -> bool:
        obj_id = to_object_id(order_id)
        if obj_id is None:
            return False

        try:
            result = await self.collection.delete_one({"_id": obj_id})
            return result.deleted_count > 0
        except PyMongoError as e:
            logger.error(f"MongoDB error deleting order: {e}", error=e)
            raise ErrorResponse("Database error during order deletion", status_code=503)

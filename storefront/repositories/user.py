"""
User repository: admin access to stored user accounts
"""

from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.user import UserAccount
from storefront.repositories.product import to_object_id
from storefront.schemas.user import UserRoleUpdate

# Credentials never leave the repository
ACCOUNT_PROJECTION = {
    "password": 0,
    "reset_password_token": 0,
    "reset_password_expire": 0,
}


class UserRepository:
    """Repository for user account data access"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    def _doc_to_account(self, doc: dict) -> Optional[UserAccount]:
        if not doc:
            return None

        doc = dict(doc)
        doc["id"] = str(doc.pop("_id"))
        return UserAccount(**doc)

    async def list_all(self) -> List[UserAccount]:
        try:
            docs = await self.collection.find({}, ACCOUNT_PROJECTION).to_list(length=None)
            return [self._doc_to_account(doc) for doc in docs]
        except PyMongoError as e:
            logger.error(f"MongoDB error listing users: {e}", error=e)
            raise ErrorResponse("Database error during user listing", status_code=503)

    async def get_by_id(self, user_id: str) -> Optional[UserAccount]:
        obj_id = to_object_id(user_id)
        if obj_id is None:
            return None

        try:
            doc = await self.collection.find_one({"_id": obj_id}, ACCOUNT_PROJECTION)
            return self._doc_to_account(doc)
        except PyMongoError as e:
            logger.error(f"MongoDB error getting user: {e}", error=e)
            raise ErrorResponse("Database error during user retrieval", status_code=503)

    async def update(self, user_id: str, user_data: UserRoleUpdate) -> Optional[UserAccount]:
        obj_id = to_object_id(user_id)
        if obj_id is None:
            return None

        update_data = user_data.model_dump(mode="json", exclude_none=True)
        try:
            doc = await self.collection.find_one_and_update(
                {"_id": obj_id},
                {"$set": update_data},
                projection=ACCOUNT_PROJECTION,
                return_document=ReturnDocument.AFTER,
            )
            return self._doc_to_account(doc)
        except PyMongoError as e:
            logger.error(f"MongoDB error updating user: {e}", error=e)
            raise ErrorResponse("Database error during user update", status_code=503)

    async def delete(self, user_id: str) -> bool:
        obj_id = to_object_id(user_id)
        if obj_id is None:
            return False

        try:
            result = await self.collection.delete_one({"_id": obj_id})
            return result.deleted_count > 0
        except PyMongoError as e:
            logger.error(f"MongoDB error deleting user: {e}", error=e)
            raise ErrorResponse("Database error during user deletion", status_code=503)

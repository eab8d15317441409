"""
User service: admin management of user accounts
"""

from typing import List

from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.user import UserAccount
from storefront.repositories.user import UserRepository
from storefront.schemas.user import UserRoleUpdate


class UserService:
    """Service layer for admin user operations"""

    def __init__(self, repository: UserRepository):
        self.repository = repository

    async def get_all_users(self) -> List[UserAccount]:
        return await self.repository.list_all()

    async def get_user(self, user_id: str) -> UserAccount:
        user = await self.repository.get_by_id(user_id)
        if not user:
            raise ErrorResponse(f"User does not exist with Id: {user_id}", status_code=404)
        return user

    async def update_user_role(self, user_id: str, user_data: UserRoleUpdate, updated_by: str) -> UserAccount:
        user = await self.repository.update(user_id, user_data)
        if not user:
            raise ErrorResponse(f"User does not exist with Id: {user_id}", status_code=404)

        logger.info(
            f"Updated user {user_id}",
            user_id=updated_by,
            metadata={"event": "update_user_role", "target_user_id": user_id, "role": user.role.value}
        )
        return user

    async def delete_user(self, user_id: str, deleted_by: str) -> None:
        if not await self.repository.delete(user_id):
            raise ErrorResponse(f"User does not exist with Id: {user_id}", status_code=400)

        logger.info(
            f"Deleted user {user_id}",
            user_id=deleted_by,
            metadata={"event": "delete_user", "target_user_id": user_id}
        )

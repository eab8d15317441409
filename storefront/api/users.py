"""
Admin user management endpoints
"""

from fastapi import APIRouter, Depends

from storefront.core.errors import ErrorResponseModel
from storefront.dependencies.auth import require_admin
from storefront.dependencies.services import get_user_service
from storefront.models.user import User
from storefront.schemas.product import MessageResponse
from storefront.schemas.user import UserResponse, UserRoleUpdate, UsersResponse
from storefront.services.user import UserService

router = APIRouter(tags=["admin"])


@router.get("/admin/users", response_model=UsersResponse)
async def get_all_users(
    service: UserService = Depends(get_user_service),
    user: User = Depends(require_admin),
):
    users = await service.get_all_users()
    return UsersResponse(users=users)


@router.get(
    "/admin/user/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def get_single_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
    user: User = Depends(require_admin),
):
    account = await service.get_user(user_id)
    return UserResponse(user=account)


@router.put(
    "/admin/user/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def update_user_role(
    user_id: str,
    body: UserRoleUpdate,
    service: UserService = Depends(get_user_service),
    user: User = Depends(require_admin),
):
    """Change a user's role, optionally with their name and email."""
    account = await service.update_user_role(user_id, body, updated_by=user.id)
    return UserResponse(user=account)


@router.delete(
    "/admin/user/{user_id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponseModel}},
)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
    user: User = Depends(require_admin),
):
    await service.delete_user(user_id, deleted_by=user.id)
    return MessageResponse(message="User Deleted Successfully")

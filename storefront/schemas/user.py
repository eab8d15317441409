"""
API schemas for admin user management
"""

from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from storefront.models.user import UserAccount, UserRole


class UserRoleUpdate(BaseModel):
    """Admin update of a user's name, email and role; unset fields are left untouched"""
    name: Optional[str] = Field(None, min_length=4, max_length=30)
    email: Optional[EmailStr] = None
    role: UserRole


class UserResponse(BaseModel):
    success: bool = True
    user: UserAccount


class UsersResponse(BaseModel):
    success: bool = True
    users: List[UserAccount]

"""
User models: the authenticated caller and stored user accounts
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from storefront.models.product import ProductImage, utc_now


class User(BaseModel):
    """User model from JWT token payload"""

    id: str
    name: str = ""
    email: Optional[EmailStr] = None
    roles: List[str] = []

    def is_admin(self) -> bool:
        """Check if user has admin role"""
        return any(role.lower() == "admin" for role in self.roles)

    @property
    def display_name(self) -> str:
        """Name captured on reviews; falls back to the email local part"""
        if self.name:
            return self.name
        if self.email:
            return self.email.split("@")[0]
        return self.id


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class UserAccount(BaseModel):
    """User account as stored in the users collection, without credentials"""

    id: str
    name: str
    email: str
    role: UserRole = UserRole.USER
    avatar: Optional[ProductImage] = None
    created_at: datetime = Field(default_factory=utc_now)

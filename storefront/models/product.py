"""
Product and embedded Review models
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(timezone.utc)


class ProductImage(BaseModel):
    """Image stored in the remote asset store"""
    public_id: str
    url: str


class Review(BaseModel):
    """Review embedded in a product; one per user per product"""
    id: str
    user: str
    name: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)


class ProductBase(BaseModel):
    """Base Product model with all catalog fields"""
    name: str
    description: str
    price: float = Field(..., ge=0)
    category: str
    stock: int = Field(default=1, ge=0)
    images: List[ProductImage] = []


class Product(ProductBase):
    """Product model as stored, including derived review data"""
    id: str

    # Derived from reviews, kept in sync by the review service
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    reviews: List[Review] = []

    user: Optional[str] = None
    version: int = 0
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

"""
API schemas for Product endpoints following FastAPI best practices
"""

from typing import List, Optional
from pydantic import BaseModel, Field

from storefront.models.product import Product, ProductImage


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    price: float = Field(..., ge=0, lt=100_000_000)
    category: str = Field(..., min_length=1, max_length=100)
    stock: int = Field(default=1, ge=0, le=9999)
    images: List[ProductImage] = []


class ProductUpdate(BaseModel):
    """Schema for updating an existing product; unset fields are left untouched"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    price: Optional[float] = Field(None, ge=0, lt=100_000_000)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    stock: Optional[int] = Field(None, ge=0, le=9999)
    images: Optional[List[ProductImage]] = None


class ProductResponse(BaseModel):
    """Envelope for single product responses"""
    success: bool = True
    product: Product


class ProductsResponse(BaseModel):
    """Envelope for unpaginated product lists"""
    success: bool = True
    products: List[Product]


class MessageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None

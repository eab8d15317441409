"""
API schemas for Review endpoints
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from storefront.models.product import Review


class ReviewCreate(BaseModel):
    """Body of PUT /review; a second submission by the same user updates the first"""
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="productId", min_length=1)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=1000)


class ReviewsResponse(BaseModel):
    success: bool = True
    reviews: List[Review]

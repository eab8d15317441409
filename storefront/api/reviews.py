"""
Review API endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from storefront.core.errors import ErrorResponseModel
from storefront.dependencies.auth import get_current_user
from storefront.dependencies.services import get_review_service
from storefront.models.user import User
from storefront.schemas.product import MessageResponse
from storefront.schemas.review import ReviewCreate, ReviewsResponse
from storefront.services.review import ReviewService

router = APIRouter(tags=["reviews"])


@router.put(
    "/review",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponseModel}, 404: {"model": ErrorResponseModel}},
)
async def create_product_review(
    review: ReviewCreate,
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """Add the user's review of a product, or replace it if they already reviewed it."""
    await service.upsert_review(
        review.product_id,
        user_id=user.id,
        user_name=user.display_name,
        rating=review.rating,
        comment=review.comment,
    )
    return MessageResponse()


@router.get(
    "/reviews",
    response_model=ReviewsResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def get_product_reviews(
    id: Optional[str] = Query(None, description="Product ID"),
    product_id: Optional[str] = Query(None, alias="productId"),
    service: ReviewService = Depends(get_review_service),
):
    reviews = await service.list_reviews(id or product_id)
    return ReviewsResponse(reviews=reviews)


@router.delete(
    "/reviews",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponseModel},
        401: {"model": ErrorResponseModel},
        404: {"model": ErrorResponseModel},
    },
)
async def delete_review(
    product_id: Optional[str] = Query(None, alias="productId"),
    id: Optional[str] = Query(None, description="Review ID"),
    review_id: Optional[str] = Query(None, alias="reviewId"),
    service: ReviewService = Depends(get_review_service),
    user: User = Depends(get_current_user),
):
    """Delete a review; rating and review count are recomputed from what remains."""
    await service.remove_review(product_id, id or review_id)
    return MessageResponse()

"""
Review service: keeps a product's embedded reviews and its derived
rating/review_count consistent.

Every mutation rewrites reviews, rating and review_count in a single
version-checked update. If another request changed the product in between,
the mutation is re-applied to a fresh copy.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId

from storefront.core.config import config
from storefront.core.errors import ErrorResponse
from storefront.core.logger import logger
from storefront.models.product import Review
from storefront.repositories.product import ProductRepository

ReviewDoc = Dict[str, Any]


def apply_review(
    reviews: List[ReviewDoc],
    user_id: str,
    name: str,
    rating: int,
    comment: Optional[str],
) -> List[ReviewDoc]:
    """
    Return a new review list with the user's review added or replaced.

    An existing review keeps its id and display name; only rating and
    comment change.
    """
    updated = []
    found = False
    for review in reviews:
        if str(review.get("user")) == str(user_id):
            review = {**review, "rating": rating, "comment": comment}
            found = True
        updated.append(review)

    if not found:
        updated.append({
            "_id": ObjectId(),
            "user": user_id,
            "name": name,
            "rating": rating,
            "comment": comment,
            "created_at": datetime.now(timezone.utc),
        })
    return updated


def drop_review(reviews: List[ReviewDoc], review_id: str) -> List[ReviewDoc]:
    """Return reviews without the one whose id is review_id (no-op when absent)"""
    return [review for review in reviews if str(review.get("_id")) != str(review_id)]


def average_rating(reviews: List[ReviewDoc]) -> float:
    if not reviews:
        return 0
    return sum(review["rating"] for review in reviews) / len(reviews)


class ReviewService:
    """Service layer for product reviews"""

    def __init__(self, repository: ProductRepository, max_retries: Optional[int] = None):
        if max_retries is None:
            max_retries = config.review_update_max_retries
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.repository = repository
        self.max_retries = max_retries

    async def upsert_review(
        self,
        product_id: str,
        user_id: str,
        user_name: str,
        rating: int,
        comment: Optional[str],
    ) -> None:
        """Create the user's review of a product, or update it if one exists"""
        if not product_id:
            raise ErrorResponse("Product ID is required", status_code=400)

        await self._mutate_reviews(
            product_id,
            lambda reviews: apply_review(reviews, user_id, user_name, rating, comment),
            event="upsert_review",
            user_id=user_id,
        )

    async def remove_review(self, product_id: Optional[str], review_id: Optional[str]) -> None:
        """Delete a review by id; an unknown review id leaves the reviews as they are"""
        if not product_id or not review_id:
            raise ErrorResponse("Product ID and Review ID are required", status_code=400)

        await self._mutate_reviews(
            product_id,
            lambda reviews: drop_review(reviews, review_id),
            event="remove_review",
            review_id=review_id,
        )

    async def list_reviews(self, product_id: str) -> List[Review]:
        product = await self.repository.get_by_id(product_id)
        if not product:
            raise ErrorResponse("Product not found", status_code=404)
        return product.reviews

    async def _mutate_reviews(
        self,
        product_id: str,
        mutate: Callable[[List[ReviewDoc]], List[ReviewDoc]],
        event: str,
        **log_fields,
    ) -> None:
        for attempt in range(1, self.max_retries + 1):
            doc = await self.repository.find_document(product_id)
            if not doc:
                raise ErrorResponse("Product not found", status_code=404)

            reviews = mutate(list(doc.get("reviews", [])))
            rating = average_rating(reviews)

            saved = await self.repository.save_reviews(
                doc["_id"], doc.get("version"), reviews, rating, len(reviews)
            )
            if saved:
                logger.info(
                    f"Reviews updated for product {product_id}",
                    metadata={
                        "event": event,
                        "product_id": product_id,
                        "rating": rating,
                        "review_count": len(reviews),
                        "attempt": attempt,
                        **log_fields,
                    }
                )
                return

            logger.warning(
                f"Product {product_id} changed during review update, retrying",
                metadata={"event": f"{event}_conflict", "product_id": product_id, "attempt": attempt}
            )

        raise ErrorResponse(
            "Concurrent review update, please retry",
            status_code=409,
            details={"product_id": product_id},
        )

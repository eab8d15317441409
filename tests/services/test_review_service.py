"""Tests for review aggregation and the review service"""
import pytest
from bson import ObjectId
from unittest.mock import MagicMock

from storefront.core.errors import ErrorResponse
from storefront.services.review import (
    ReviewService,
    apply_review,
    average_rating,
    drop_review,
)


def saved_update(mock_collection, call_index=-1):
    """Return (filter, update) of an update_one call on the collection"""
    args, _ = mock_collection.update_one.call_args_list[call_index]
    return args[0], args[1]


class TestReviewHelpers:
    """Test pure review list operations"""

    def test_average_of_empty_is_zero(self):
        assert average_rating([]) == 0

    def test_average(self, review_factory):
        reviews = [review_factory("u1", 5), review_factory("u2", 3), review_factory("u3", 4)]
        assert average_rating(reviews) == 4

    def test_apply_review_appends_new_author(self, review_factory):
        existing = [review_factory("u1", 5)]
        result = apply_review(existing, "u2", "Bob", 3, "meh")

        assert len(result) == 2
        assert result[1]["user"] == "u2"
        assert result[1]["name"] == "Bob"
        assert isinstance(result[1]["_id"], ObjectId)
        assert len(existing) == 1

    def test_apply_review_replaces_same_author(self, review_factory):
        original = review_factory("u1", 5, name="Alice", comment="great")
        result = apply_review([original], "u1", "Alice B", 2, "changed my mind")

        assert len(result) == 1
        assert result[0]["_id"] == original["_id"]
        assert result[0]["rating"] == 2
        assert result[0]["comment"] == "changed my mind"
        assert result[0]["name"] == "Alice"
        assert original["rating"] == 5

    def test_drop_review_by_string_id(self, review_factory):
        keep, gone = review_factory("u1", 5), review_factory("u2", 1)
        assert drop_review([keep, gone], str(gone["_id"])) == [keep]

    def test_drop_unknown_review_is_noop(self, review_factory):
        reviews = [review_factory("u1", 5)]
        assert drop_review(reviews, str(ObjectId())) == reviews


class TestUpsertReview:
    """Test creating and replacing reviews"""

    @pytest.fixture
    def service(self, product_repository):
        return ReviewService(product_repository, max_retries=3)

    @pytest.mark.asyncio
    async def test_first_review(self, service, mock_collection, product_doc, product_id):
        mock_collection.find_one.return_value = product_doc()

        await service.upsert_review(product_id, "u1", "Alice", 4, "nice")

        query, update = saved_update(mock_collection)
        assert query == {"_id": ObjectId(product_id), "version": 0}
        assert update["$set"]["rating"] == 4
        assert update["$set"]["review_count"] == 1
        assert update["$set"]["reviews"][0]["user"] == "u1"
        assert update["$inc"] == {"version": 1}

    @pytest.mark.asyncio
    async def test_second_author_averages(self, service, mock_collection, product_doc,
                                          review_factory, product_id):
        mock_collection.find_one.return_value = product_doc(reviews=[review_factory("u1", 5)])

        await service.upsert_review(product_id, "u2", "Bob", 3, "ok")

        _, update = saved_update(mock_collection)
        assert update["$set"]["rating"] == 4
        assert update["$set"]["review_count"] == 2

    @pytest.mark.asyncio
    async def test_same_author_replaces(self, service, mock_collection, product_doc,
                                        review_factory, product_id):
        mock_collection.find_one.return_value = product_doc(
            reviews=[review_factory("u1", 5, comment="great")]
        )

        await service.upsert_review(product_id, "u1", "Alice", 1, "broke")

        _, update = saved_update(mock_collection)
        assert update["$set"]["review_count"] == 1
        assert update["$set"]["rating"] == 1
        assert update["$set"]["reviews"][0]["comment"] == "broke"

    @pytest.mark.asyncio
    async def test_unknown_product(self, service, mock_collection, product_id):
        mock_collection.find_one.return_value = None

        with pytest.raises(ErrorResponse) as exc_info:
            await service.upsert_review(product_id, "u1", "Alice", 4, "nice")

        assert exc_info.value.status_code == 404
        mock_collection.update_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_product_id_is_not_found(self, service, mock_collection):
        with pytest.raises(ErrorResponse) as exc_info:
            await service.upsert_review("not-an-id", "u1", "Alice", 4, "nice")

        assert exc_info.value.status_code == 404
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_product_id(self, service, mock_collection):
        with pytest.raises(ErrorResponse) as exc_info:
            await service.upsert_review(None, "u1", "Alice", 4, "nice")

        assert exc_info.value.status_code == 400
        mock_collection.find_one.assert_not_called()

    @pytest.mark.asyncio
    async def test_legacy_document_without_version(self, service, mock_collection,
                                                   product_doc, product_id):
        doc = product_doc()
        del doc["version"]
        mock_collection.find_one.return_value = doc

        await service.upsert_review(product_id, "u1", "Alice", 4, "nice")

        query, _ = saved_update(mock_collection)
        assert query["version"] == {"$exists": False}


class TestConcurrentUpdates:
    """Test retry on version conflicts"""

    @pytest.mark.asyncio
    async def test_conflict_reapplies_on_fresh_copy(self, product_repository, mock_collection,
                                                    product_doc, review_factory, product_id):
        other = review_factory("u2", 1)
        mock_collection.find_one.side_effect = [
            product_doc(version=0),
            product_doc(reviews=[other], version=1),
        ]
        mock_collection.update_one.side_effect = [
            MagicMock(matched_count=0),
            MagicMock(matched_count=1),
        ]
        service = ReviewService(product_repository, max_retries=3)

        await service.upsert_review(product_id, "u1", "Alice", 5, "top")

        assert mock_collection.update_one.await_count == 2
        query, update = saved_update(mock_collection)
        assert query["version"] == 1
        assert update["$set"]["review_count"] == 2
        assert update["$set"]["rating"] == 3
        assert [r["user"] for r in update["$set"]["reviews"]] == ["u2", "u1"]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self, product_repository, mock_collection,
                                              product_doc, product_id):
        mock_collection.find_one.return_value = product_doc()
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        service = ReviewService(product_repository, max_retries=2)

        with pytest.raises(ErrorResponse) as exc_info:
            await service.upsert_review(product_id, "u1", "Alice", 5, "top")

        assert exc_info.value.status_code == 409
        assert mock_collection.update_one.await_count == 2

    def test_retry_default_from_config(self, product_repository):
        from storefront.core.config import config

        assert ReviewService(product_repository).max_retries == config.review_update_max_retries

    def test_explicit_retry_budget_is_kept(self, product_repository):
        assert ReviewService(product_repository, max_retries=1).max_retries == 1

    @pytest.mark.parametrize("max_retries", [0, -1])
    def test_retry_budget_must_be_positive(self, product_repository, max_retries):
        with pytest.raises(ValueError):
            ReviewService(product_repository, max_retries=max_retries)

    @pytest.mark.asyncio
    async def test_single_attempt_budget(self, product_repository, mock_collection,
                                         product_doc, product_id):
        mock_collection.find_one.return_value = product_doc()
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        service = ReviewService(product_repository, max_retries=1)

        with pytest.raises(ErrorResponse) as exc_info:
            await service.upsert_review(product_id, "u1", "Alice", 5, "top")

        assert exc_info.value.status_code == 409
        assert mock_collection.update_one.await_count == 1


class TestRemoveReview:
    """Test deleting reviews"""

    @pytest.fixture
    def service(self, product_repository):
        return ReviewService(product_repository, max_retries=3)

    @pytest.mark.asyncio
    async def test_remove_recomputes(self, service, mock_collection, product_doc,
                                     review_factory, product_id):
        r1, r2, r3 = review_factory("u1", 5), review_factory("u2", 3), review_factory("u3", 1)
        mock_collection.find_one.return_value = product_doc(reviews=[r1, r2, r3])

        await service.remove_review(product_id, str(r3["_id"]))

        _, update = saved_update(mock_collection)
        assert update["$set"]["rating"] == 4
        assert update["$set"]["review_count"] == 2

    @pytest.mark.asyncio
    async def test_remove_last_review_resets_rating(self, service, mock_collection,
                                                    product_doc, review_factory, product_id):
        only = review_factory("u1", 5)
        mock_collection.find_one.return_value = product_doc(reviews=[only])

        await service.remove_review(product_id, str(only["_id"]))

        _, update = saved_update(mock_collection)
        assert update["$set"]["rating"] == 0
        assert update["$set"]["review_count"] == 0
        assert update["$set"]["reviews"] == []

    @pytest.mark.asyncio
    async def test_remove_unknown_review_keeps_reviews(self, service, mock_collection,
                                                       product_doc, review_factory, product_id):
        r1, r2 = review_factory("u1", 5), review_factory("u2", 3)
        mock_collection.find_one.return_value = product_doc(reviews=[r1, r2])

        await service.remove_review(product_id, str(ObjectId()))

        _, update = saved_update(mock_collection)
        assert update["$set"]["reviews"] == [r1, r2]
        assert update["$set"]["rating"] == 4
        assert update["$set"]["review_count"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id,review_id", [
        (None, "abc"),
        ("507f1f77bcf86cd799439011", None),
        ("", ""),
    ])
    async def test_missing_ids_touch_nothing(self, service, mock_collection, product_id, review_id):
        with pytest.raises(ErrorResponse) as exc_info:
            await service.remove_review(product_id, review_id)

        assert exc_info.value.status_code == 400
        mock_collection.find_one.assert_not_called()
        mock_collection.update_one.assert_not_called()


class TestListReviews:

    @pytest.mark.asyncio
    async def test_returns_reviews(self, product_repository, mock_collection, product_doc,
                                   review_factory, product_id):
        review = review_factory("u1", 4, name="Alice")
        mock_collection.find_one.return_value = product_doc(reviews=[review])

        reviews = await ReviewService(product_repository).list_reviews(product_id)

        assert len(reviews) == 1
        assert reviews[0].id == str(review["_id"])
        assert reviews[0].name == "Alice"
        assert reviews[0].rating == 4

    @pytest.mark.asyncio
    async def test_unknown_product(self, product_repository, mock_collection, product_id):
        mock_collection.find_one.return_value = None

        with pytest.raises(ErrorResponse) as exc_info:
            await ReviewService(product_repository).list_reviews(product_id)

        assert exc_info.value.status_code == 404

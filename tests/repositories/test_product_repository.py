"""Tests for the product repository"""
import pytest
from bson import ObjectId
from unittest.mock import MagicMock
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from storefront.core.errors import ErrorResponse
from storefront.repositories.product import to_object_id


class TestToObjectId:

    def test_valid(self, product_id):
        assert to_object_id(product_id) == ObjectId(product_id)

    @pytest.mark.parametrize("value", [None, "", "abc", "507f1f77bcf86cd79943901z"])
    def test_invalid(self, value):
        assert to_object_id(value) is None


class TestListPage:
    """Test listing counts and error translation"""

    @pytest.mark.asyncio
    async def test_counts(self, product_repository, mock_collection, product_doc, cursor_factory):
        mock_collection.count_documents.side_effect = [12, 5]
        mock_collection.find.return_value = cursor_factory([product_doc()])

        products, total, filtered = await product_repository.list_page(
            {"category": "Gadgets", "page": "2"}, 4
        )

        assert (total, filtered) == (12, 5)
        assert products[0].name == "Blue Widget"
        assert mock_collection.count_documents.await_args_list[0].args[0] == {}
        assert mock_collection.count_documents.await_args_list[1].args[0] == {"category": "Gadgets"}

    @pytest.mark.asyncio
    async def test_store_rejected_filter_is_client_error(self, product_repository, mock_collection):
        mock_collection.count_documents.side_effect = OperationFailure("bad query")

        with pytest.raises(ErrorResponse) as exc_info:
            await product_repository.list_page({"price": {"gte": "1"}}, 8)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid filter query"

    @pytest.mark.asyncio
    async def test_unavailable_store(self, product_repository, mock_collection):
        mock_collection.count_documents.side_effect = ServerSelectionTimeoutError("down")

        with pytest.raises(ErrorResponse) as exc_info:
            await product_repository.list_page({}, 8)

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query,per_page", [
        ({"page": "99999999999999999999"}, 8),
        ({"page": "2"}, 2 ** 63),
        ({"page": str(2 ** 40)}, 2 ** 30),
    ])
    async def test_page_beyond_int64_is_rejected(self, product_repository, mock_collection,
                                                 query, per_page):
        with pytest.raises(ErrorResponse) as exc_info:
            await product_repository.list_page(query, per_page)

        assert exc_info.value.status_code == 400
        mock_collection.count_documents.assert_not_called()
        mock_collection.find.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_query_never_hits_store(self, product_repository, mock_collection):
        with pytest.raises(ErrorResponse) as exc_info:
            await product_repository.list_page({"secret": "1"}, 8)

        assert exc_info.value.status_code == 400
        mock_collection.count_documents.assert_not_called()


class TestSaveReviews:
    """Test the version-checked review write"""

    @pytest.mark.asyncio
    async def test_update_shape(self, product_repository, mock_collection, product_id):
        obj_id = ObjectId(product_id)

        saved = await product_repository.save_reviews(obj_id, 3, [], 0, 0)

        assert saved is True
        query, update = mock_collection.update_one.await_args.args
        assert query == {"_id": obj_id, "version": 3}
        assert update["$set"]["reviews"] == []
        assert update["$set"]["rating"] == 0
        assert update["$set"]["review_count"] == 0
        assert "updated_at" in update["$set"]
        assert update["$inc"] == {"version": 1}

    @pytest.mark.asyncio
    async def test_missing_version_matches_unversioned(self, product_repository, mock_collection,
                                                       product_id):
        await product_repository.save_reviews(ObjectId(product_id), None, [], 0, 0)

        query, _ = mock_collection.update_one.await_args.args
        assert query["version"] == {"$exists": False}

    @pytest.mark.asyncio
    async def test_stale_version(self, product_repository, mock_collection, product_id):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)

        assert await product_repository.save_reviews(ObjectId(product_id), 1, [], 0, 0) is False


class TestDecrementStock:

    @pytest.mark.asyncio
    async def test_decrements(self, product_repository, mock_collection, product_id):
        assert await product_repository.decrement_stock(product_id, 3) is True

        query, update = mock_collection.update_one.await_args.args
        assert query == {"_id": ObjectId(product_id)}
        assert update["$inc"] == {"stock": -3}

    @pytest.mark.asyncio
    async def test_unknown_product(self, product_repository, mock_collection, product_id):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)

        assert await product_repository.decrement_stock(product_id, 1) is False

    @pytest.mark.asyncio
    async def test_invalid_id(self, product_repository, mock_collection):
        assert await product_repository.decrement_stock("nope", 1) is False
        mock_collection.update_one.assert_not_called()


class TestFindMissing:

    @pytest.mark.asyncio
    async def test_reports_absent_and_invalid_ids(self, product_repository, mock_collection,
                                                  product_id, cursor_factory):
        mock_collection.find.return_value = cursor_factory([{"_id": ObjectId(product_id)}])
        absent = str(ObjectId())

        missing = await product_repository.find_missing([product_id, absent, "bogus"])

        assert missing == [absent, "bogus"]
        query, projection = mock_collection.find.call_args.args
        assert query == {"_id": {"$in": [ObjectId(product_id), ObjectId(absent)]}}
        assert projection == {"_id": 1}

    @pytest.mark.asyncio
    async def test_all_present(self, product_repository, mock_collection, product_id,
                               cursor_factory):
        mock_collection.find.return_value = cursor_factory([{"_id": ObjectId(product_id)}])

        assert await product_repository.find_missing([product_id]) == []

"""Shared test fixtures"""
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from bson import ObjectId

from storefront.repositories.product import ProductRepository


PRODUCT_ID = "507f1f77bcf86cd799439011"


def make_cursor(docs):
    """Mock Motor cursor supporting skip/limit chaining and to_list"""
    cursor = MagicMock()
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


def make_review(user, rating, name="someone", comment="ok"):
    return {
        "_id": ObjectId(),
        "user": user,
        "name": name,
        "rating": rating,
        "comment": comment,
        "created_at": datetime.now(timezone.utc),
    }


@pytest.fixture
def product_id():
    """Sample product ID for testing"""
    return PRODUCT_ID


@pytest.fixture
def mock_collection():
    """Mock MongoDB collection; find() is synchronous in Motor"""
    collection = AsyncMock()
    collection.find = MagicMock(return_value=make_cursor([]))
    collection.update_one.return_value = MagicMock(matched_count=1)
    return collection


@pytest.fixture
def product_repository(mock_collection):
    return ProductRepository(mock_collection)


@pytest.fixture
def product_doc():
    """Factory for product documents as stored in MongoDB"""
    def _make(reviews=None, version=0, **overrides):
        reviews = reviews or []
        ratings = [r["rating"] for r in reviews]
        doc = {
            "_id": ObjectId(PRODUCT_ID),
            "name": "Blue Widget",
            "description": "A widget",
            "price": 120.0,
            "category": "Gadgets",
            "stock": 10,
            "images": [],
            "rating": sum(ratings) / len(ratings) if ratings else 0,
            "review_count": len(reviews),
            "reviews": reviews,
            "user": "admin1",
            "version": version,
            "created_at": datetime.now(timezone.utc),
            "updated_at": datetime.now(timezone.utc),
        }
        doc.update(overrides)
        return doc
    return _make


@pytest.fixture
def review_factory():
    return make_review


@pytest.fixture
def cursor_factory():
    return make_cursor

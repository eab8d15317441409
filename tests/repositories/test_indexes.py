"""Tests for index creation at startup"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from pymongo.errors import OperationFailure

from storefront.db.indexes import ORDER_INDEXES, PRODUCT_INDEXES, USER_INDEXES, create_indexes


@pytest.fixture
def database():
    collections = {"products": AsyncMock(), "orders": AsyncMock(), "users": AsyncMock()}
    database = MagicMock()
    database.__getitem__.side_effect = collections.__getitem__
    database.collections = collections
    return database


@pytest.mark.asyncio
async def test_creates_every_index(database):
    await create_indexes(database)

    products = database.collections["products"].create_index
    orders = database.collections["orders"].create_index
    assert [c.kwargs["name"] for c in products.await_args_list] == [n for _, n in PRODUCT_INDEXES]
    assert [c.kwargs["name"] for c in orders.await_args_list] == [n for _, n in ORDER_INDEXES]


@pytest.mark.asyncio
async def test_user_email_is_unique(database):
    await create_indexes(database)

    users = database.collections["users"].create_index
    assert users.await_count == len(USER_INDEXES)
    assert all(c.kwargs["unique"] for c in users.await_args_list)
    assert not any(c.kwargs["unique"] for c in database.collections["products"].create_index.await_args_list)


@pytest.mark.asyncio
async def test_failed_index_does_not_stop_the_rest(database):
    database.collections["products"].create_index.side_effect = OperationFailure("conflict")

    await create_indexes(database)

    assert database.collections["orders"].create_index.await_count == len(ORDER_INDEXES)

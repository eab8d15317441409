"""
MongoDB index management.

Indexes backing the storefront listing filters, order lookups and user emails,
created at application startup. ``create_index`` is idempotent, so
restarts are safe.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from storefront.core.logger import logger

PRODUCT_INDEXES = [
    ([("category", ASCENDING), ("price", ASCENDING)], "idx_category_price"),
    ([("price", ASCENDING)], "idx_price"),
    ([("rating", DESCENDING)], "idx_rating"),
    ([("created_at", DESCENDING)], "idx_created"),
]

ORDER_INDEXES = [
    ([("user", ASCENDING), ("created_at", DESCENDING)], "idx_user_created"),
    ([("order_status", ASCENDING)], "idx_order_status"),
]

USER_INDEXES = [
    ([("email", ASCENDING)], "idx_email_unique"),
]


async def create_indexes(database: AsyncIOMotorDatabase) -> None:
    """Create product, order and user indexes; failures are logged, not fatal"""
    for collection_name, indexes, unique in (
        ("products", PRODUCT_INDEXES, False),
        ("orders", ORDER_INDEXES, False),
        ("users", USER_INDEXES, True),
    ):
        collection = database[collection_name]
        for keys, name in indexes:
            try:
                await collection.create_index(keys, name=name, unique=unique)
            except PyMongoError as e:
                logger.warning(
                    f"Could not create index {name} on {collection_name}: {e}",
                    metadata={"event": "index_creation_failed", "collection": collection_name, "index": name}
                )

    logger.info(
        "MongoDB indexes ensured",
        metadata={
            "event": "indexes_created",
            "products": [name for _, name in PRODUCT_INDEXES],
            "orders": [name for _, name in ORDER_INDEXES],
            "users": [name for _, name in USER_INDEXES],
        }
    )

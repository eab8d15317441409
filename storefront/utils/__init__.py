"""
Utilities module initialization
"""

from .query_features import (
    FieldType,
    ListingParams,
    PRODUCT_FILTER_FIELDS,
    QueryComposer,
    parse_positive_int,
    parse_query_items,
    scalar_param,
)

__all__ = [
    "FieldType",
    "ListingParams",
    "PRODUCT_FILTER_FIELDS",
    "QueryComposer",
    "parse_positive_int",
    "parse_query_items",
    "scalar_param",
]

"""
Query features for collection listings: keyword search, field filters and
pagination composed over a MongoDB collection.

Incoming query strings use bracket notation for operators
(``price[gte]=100&price[lte]=500``). They are decoded into a nested mapping,
then validated into typed ``ListingParams`` against an allow-list of
filterable fields before any condition reaches the database.
"""

import math
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel

from storefront.core.errors import ErrorResponse

# Keys consumed by search/pagination, never treated as field filters
RESERVED_KEYS = ("keyword", "page", "limit")

COMPARISON_OPERATORS = {
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
}

MAX_NESTING_DEPTH = 5

# Largest skip/limit MongoDB accepts (signed 64-bit)
MAX_BSON_INT = 2 ** 63 - 1

_BRACKET_SEGMENT = re.compile(r"\[([^\[\]]*)\]")
_BRACKET_SUFFIX = re.compile(r"(?:\[[^\[\]]*\])+")


class FieldType(str, Enum):
    NUMERIC = "numeric"  # equality or range
    EXACT = "exact"      # equality, or membership when repeated


ALLOWED_OPERATORS = {
    FieldType.NUMERIC: {"eq", *COMPARISON_OPERATORS},
    FieldType.EXACT: {"eq"},
}

PRODUCT_FILTER_FIELDS: Dict[str, FieldType] = {
    "price": FieldType.NUMERIC,
    "rating": FieldType.NUMERIC,
    "review_count": FieldType.NUMERIC,
    "stock": FieldType.NUMERIC,
    "category": FieldType.EXACT,
}


def parse_query_items(items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Decode raw query string pairs into a nested mapping.

    ``a=1`` -> ``{"a": "1"}``, ``a[b]=1`` -> ``{"a": {"b": "1"}}``,
    ``a[]=1&a[]=2`` or ``a=1&a=2`` -> ``{"a": ["1", "2"]}``.
    """
    result: Dict[str, Any] = {}
    for raw_key, value in items:
        head, bracket, rest = raw_key.partition("[")
        if not head:
            continue
        path = [head]
        suffix = bracket + rest
        if "]" in head or (suffix and not _BRACKET_SUFFIX.fullmatch(suffix)):
            raise ErrorResponse(
                f"Malformed query parameter '{raw_key}'",
                status_code=400,
                details={"parameter": raw_key},
            )
        if suffix:
            path.extend(_BRACKET_SEGMENT.findall(suffix))
        if len(path) > MAX_NESTING_DEPTH:
            raise ErrorResponse(
                f"Query parameter '{raw_key}' is nested too deeply",
                status_code=400,
            )
        _assign(result, path, value)
    return result


def _assign(target: Dict[str, Any], path: List[str], value: str) -> None:
    key = path[0]
    remaining = path[1:]

    if not remaining or remaining == [""]:
        existing = target.get(key)
        if existing is None:
            target[key] = [value] if remaining else value
        elif isinstance(existing, list):
            existing.append(value)
        elif isinstance(existing, dict):
            raise ErrorResponse(f"Conflicting query parameter '{key}'", status_code=400)
        else:
            target[key] = [existing, value]
        return

    child = target.get(key)
    if child is None:
        child = target[key] = {}
    elif not isinstance(child, dict):
        raise ErrorResponse(f"Conflicting query parameter '{key}'", status_code=400)
    _assign(child, remaining, value)


def parse_positive_int(value: Any) -> Optional[int]:
    """Return value as an integer when it is one and greater than zero"""
    if value is None or isinstance(value, (dict, list)):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number > 0 else None


class FilterCondition(BaseModel):
    """One (field, operator, value) triple parsed from the query string"""
    field: str
    operator: str
    value: Any


class ListingParams(BaseModel):
    """Typed view of a listing request's query parameters"""
    keyword: Optional[str] = None
    page: Optional[str] = None
    limit: Optional[str] = None
    filters: List[FilterCondition] = []

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        allowed_fields: Mapping[str, FieldType] = PRODUCT_FILTER_FIELDS,
    ) -> "ListingParams":
        """
        Validate a decoded query mapping.

        Raises:
            ErrorResponse: 400 for unknown fields, unsupported operators or
                values that do not fit the field's declared type
        """
        filters: List[FilterCondition] = []
        for field, raw in mapping.items():
            if field in RESERVED_KEYS:
                continue

            field_type = allowed_fields.get(field)
            if field_type is None:
                raise ErrorResponse(
                    f"Filtering on '{field}' is not supported",
                    status_code=400,
                    details={"field": field, "allowed": sorted(allowed_fields)},
                )

            if isinstance(raw, dict):
                for operator, value in raw.items():
                    filters.append(_build_condition(field, field_type, operator, value))
            else:
                filters.append(_build_condition(field, field_type, "eq", raw))

        return cls(
            keyword=scalar_param(mapping, "keyword"),
            page=scalar_param(mapping, "page"),
            limit=scalar_param(mapping, "limit"),
            filters=filters,
        )


def scalar_param(mapping: Mapping[str, Any], key: str) -> Optional[str]:
    """Single value of a query parameter; the last one wins when repeated"""
    value = mapping.get(key)
    if isinstance(value, list):
        value = value[-1] if value else None
    if isinstance(value, dict):
        raise ErrorResponse(f"Query parameter '{key}' must be a single value", status_code=400)
    return value


def _build_condition(field: str, field_type: FieldType, operator: str, value: Any) -> FilterCondition:
    if operator not in ALLOWED_OPERATORS[field_type]:
        raise ErrorResponse(
            f"Operator '{operator}' is not supported for '{field}'",
            status_code=400,
            details={"field": field, "operator": operator},
        )

    if isinstance(value, dict):
        raise ErrorResponse(f"Invalid value for '{field}'", status_code=400, details={"field": field})

    if field_type is FieldType.EXACT:
        if isinstance(value, list):
            return FilterCondition(field=field, operator="in", value=[str(v) for v in value])
        return FilterCondition(field=field, operator=operator, value=str(value))

    if isinstance(value, list):
        raise ErrorResponse(
            f"'{field}[{operator}]' accepts a single value",
            status_code=400,
            details={"field": field, "operator": operator},
        )
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        raise ErrorResponse(
            f"'{field}' must be numeric",
            status_code=400,
            details={"field": field, "value": value},
        )
    return FilterCondition(field=field, operator=operator, value=number)


def build_filter_document(filters: Iterable[FilterCondition]) -> Dict[str, Any]:
    """Merge filter triples into one MongoDB condition, one entry per field"""
    condition: Dict[str, Any] = {}
    for item in filters:
        existing = condition.get(item.field)

        if item.operator == "eq":
            if isinstance(existing, dict):
                existing["$eq"] = item.value
            else:
                condition[item.field] = item.value
            continue

        if existing is None:
            existing = condition[item.field] = {}
        elif not isinstance(existing, dict):
            existing = condition[item.field] = {"$eq": existing}

        if item.operator == "in":
            existing["$in"] = item.value
        else:
            existing[COMPARISON_OPERATORS[item.operator]] = item.value
    return condition


class QueryComposer:
    """
    Chainable search/filter/pagination over a collection.

    ``search()`` and ``filter()`` AND their conditions together;
    ``pagination()`` should be called last. ``count()`` ignores pagination,
    ``execute()`` honours it.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        query_params: Mapping[str, Any],
        allowed_fields: Mapping[str, FieldType] = PRODUCT_FILTER_FIELDS,
    ):
        self.collection = collection
        self.params = ListingParams.from_mapping(query_params, allowed_fields)
        self._conditions: List[Dict[str, Any]] = []
        self.skip = 0
        self.limit: Optional[int] = None

    def search(self) -> "QueryComposer":
        keyword = (self.params.keyword or "").strip()
        if keyword:
            self._conditions.append(
                {"name": {"$regex": re.escape(keyword), "$options": "i"}}
            )
        return self

    def filter(self) -> "QueryComposer":
        condition = build_filter_document(self.params.filters)
        if condition:
            self._conditions.append(condition)
        return self

    def pagination(self, result_per_page: int) -> "QueryComposer":
        # Missing, non-numeric and non-positive pages all mean the first page
        current_page = parse_positive_int(self.params.page) or 1
        skip = result_per_page * (current_page - 1)
        if result_per_page > MAX_BSON_INT or skip > MAX_BSON_INT:
            raise ErrorResponse(
                "Page is out of range",
                status_code=400,
                details={"page": self.params.page, "limit": result_per_page},
            )
        self.skip = skip
        self.limit = result_per_page
        return self

    @property
    def conditions(self) -> Dict[str, Any]:
        """The combined MongoDB filter built so far"""
        if not self._conditions:
            return {}
        if len(self._conditions) == 1:
            return dict(self._conditions[0])
        return {"$and": list(self._conditions)}

    async def count(self) -> int:
        return await self.collection.count_documents(self.conditions)

    async def execute(self) -> List[dict]:
        cursor = self.collection.find(self.conditions)
        if self.skip:
            cursor = cursor.skip(self.skip)
        if self.limit is not None:
            cursor = cursor.limit(self.limit)
        return await cursor.to_list(length=self.limit)

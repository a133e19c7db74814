"""
Product listing queries.

`build_product_query` turns the raw listing parameters into a `ProductQuery`
(a Mongo filter, a sort spec and a page window) and rejects bad input before
anything reaches the database. `find_products` runs that query and returns the
page together with the total number of matching products.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pymongo import ASCENDING, DESCENDING

from validation import InvalidInput, parse_object_ids, require_positive_int

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ("price", "title", "discountPercentage", "stockQuantity", "createdAt")
SORT_ORDERS = {"asc": ASCENDING, "desc": DESCENDING}
DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


@dataclass
class ProductQuery:
    filter: Dict[str, Any] = field(default_factory=dict)
    sort: List[Tuple[str, int]] = field(default_factory=list)
    skip: int = 0
    limit: int = 0  # 0 means no limit


def _sort_spec(sort: Optional[str], order: Optional[str]) -> List[Tuple[str, int]]:
    if not sort:
        return []
    if sort not in SORTABLE_FIELDS:
        raise InvalidInput(f"Cannot sort by {sort!r}; expected one of {', '.join(SORTABLE_FIELDS)}")
    direction = SORT_ORDERS.get((order or "asc").strip().lower())
    if direction is None:
        raise InvalidInput("order must be 'asc' or 'desc'")
    # _id keeps equal keys in a stable order across pages
    return [(sort, direction), ("_id", ASCENDING)]


def _window(page, limit) -> Tuple[int, int]:
    if page is None and limit is None:
        return 0, 0
    page_number = require_positive_int(page, "page") if page is not None else 1
    page_size = require_positive_int(limit, "limit") if limit is not None else DEFAULT_PAGE_SIZE
    if page_size > MAX_PAGE_SIZE:
        raise InvalidInput(f"limit must not exceed {MAX_PAGE_SIZE}")
    return (page_number - 1) * page_size, page_size


def build_product_query(
    page=None,
    limit=None,
    sort: Optional[str] = None,
    order: Optional[str] = None,
    brand: Optional[Sequence[str]] = None,
    category: Optional[Sequence[str]] = None,
    user: bool = False,
    include_deleted: bool = False,
) -> ProductQuery:
    query_filter: Dict[str, Any] = {}

    brand_ids = parse_object_ids(brand, "brand")
    if brand_ids:
        query_filter["brand"] = {"$in": brand_ids}
    category_ids = parse_object_ids(category, "category")
    if category_ids:
        query_filter["category"] = {"$in": category_ids}

    # storefront callers never see soft-deleted products
    if user or not include_deleted:
        query_filter["isDeleted"] = {"$ne": True}

    skip, page_size = _window(page, limit)
    return ProductQuery(filter=query_filter, sort=_sort_spec(sort, order), skip=skip, limit=page_size)


def find_products(collection, query: ProductQuery) -> Tuple[List[Dict[str, Any]], int]:
    total = collection.count_documents(query.filter)
    cursor = collection.find(query.filter)
    if query.sort:
        cursor = cursor.sort(query.sort)
    if query.skip:
        cursor = cursor.skip(query.skip)
    if query.limit:
        cursor = cursor.limit(query.limit)
    items = list(cursor)
    logger.debug("product query %s matched %d, returning %d", query.filter, total, len(items))
    return items, total


def embed_brands(brands_collection, products: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Replace each product's brand id with {_id, name} when the brand exists."""
    brand_ids = list({p["brand"] for p in products if p.get("brand") is not None})
    if not brand_ids:
        return products
    names = {b["_id"]: b.get("name") for b in brands_collection.find({"_id": {"$in": brand_ids}})}
    for p in products:
        if p.get("brand") in names:
            p["brand"] = {"_id": p["brand"], "name": names[p["brand"]]}
    return products

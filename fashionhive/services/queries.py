"""
Catalog query helpers.

Prices are stored as display strings, so price filtering and sorting run in
Python after the documents are fetched; only category/search go to MongoDB.
"""
import math
import re
from decimal import Decimal
from typing import Any, Iterable, Optional

from fashionhive.services.money import parse_price, to_decimal, to_float

SORT_PRICE_ASC = "price-asc"
SORT_PRICE_DESC = "price-desc"
SORT_NAME_ASC = "name-asc"
SORT_NAME_DESC = "name-desc"
SORT_NEWEST = "newest"
DEFAULT_SORT = SORT_PRICE_DESC

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def build_filter(
    category: Optional[str] = None,
    search: Optional[str] = None,
    search_fields: tuple[str, ...] = ("name", "brand"),
) -> dict:
    """MongoDB filter: case-insensitive exact category, substring search over search_fields."""
    query: dict[str, Any] = {}

    if category:
        query["category"] = {"$regex": f"^{re.escape(category)}$", "$options": "i"}

    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        if len(search_fields) == 1:
            query[search_fields[0]] = pattern
        else:
            query["$or"] = [{field: dict(pattern)} for field in search_fields]

    return query


def annotate_product(doc: dict, brand: str) -> dict:
    """Copy of a stored product with its owning collection and parsed price."""
    return {
        **doc,
        "brandCollection": brand,
        "numericPrice": parse_price(doc.get("price")),
    }


def to_response(doc: dict) -> dict:
    """JSON-ready product: stringified _id and float numericPrice."""
    out = dict(doc)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    if "numericPrice" in out:
        out["numericPrice"] = to_float(out["numericPrice"])
    return out


def filter_price_range(
    products: Iterable[dict],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
) -> list[dict]:
    """Keep products whose numericPrice lies in [min_price, max_price]."""
    result = list(products)
    if min_price is not None:
        low = to_decimal(min_price)
        result = [p for p in result if p["numericPrice"] >= low]
    if max_price is not None:
        high = to_decimal(max_price)
        result = [p for p in result if p["numericPrice"] <= high]
    return result


def _name_key(product: dict) -> str:
    return (product.get("name") or "").casefold()


def sort_products(products: list[dict], sort: Optional[str] = DEFAULT_SORT) -> list[dict]:
    """Sort by price or name; anything else means newest first (ObjectId descending)."""
    if sort == SORT_PRICE_ASC:
        return sorted(products, key=lambda p: p.get("numericPrice", Decimal("0")))
    if sort == SORT_PRICE_DESC:
        return sorted(products, key=lambda p: p.get("numericPrice", Decimal("0")), reverse=True)
    if sort == SORT_NAME_ASC:
        return sorted(products, key=_name_key)
    if sort == SORT_NAME_DESC:
        return sorted(products, key=_name_key, reverse=True)
    return sorted(products, key=lambda p: str(p.get("_id", "")), reverse=True)


def paginate(products: list[dict], page: int = 1, limit: int = DEFAULT_PAGE_SIZE) -> dict:
    """Slice one page and describe the rest of the result set."""
    total = len(products)
    skip = (page - 1) * limit
    data = [to_response(p) for p in products[skip:skip + limit]]
    pages = math.ceil(total / limit) if limit else 0

    return {
        "count": len(data),
        "total": total,
        "page": page,
        "pages": pages,
        "hasMore": page < pages,
        "data": data,
    }


def empty_page(page: int = 1) -> dict:
    return {"count": 0, "total": 0, "page": page, "pages": 0, "hasMore": False, "data": []}

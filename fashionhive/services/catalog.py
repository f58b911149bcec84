"""
Catalog Service - MongoDB brand collections

Every collection in the catalog database (apart from MongoDB's own system.*
collections) holds the products of one brand; the collection name is the
brand identifier.

Usage:
    from fashionhive.services.catalog import get_catalog

    catalog = get_catalog()
    page = await catalog.query_products(category="Kurta", sort="price-asc")
"""

import asyncio
import math
import random
from typing import Any, Optional

from bson import ObjectId

from fashionhive.db import MONGO_DB_NAME, get_catalog_db
from fashionhive.logging import get_logger, sanitize_string_for_logging
from fashionhive.services.queries import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    annotate_product,
    build_filter,
    empty_page,
    filter_price_range,
    paginate,
    sort_products,
    to_response,
)

logger = get_logger(__name__)


class BrandNotFoundError(LookupError):
    """Requested brand has no collection. Carries the brands that do exist."""

    def __init__(self, brand_name: str, available: list[str]):
        super().__init__(f"Brand '{brand_name}' not found")
        self.brand_name = brand_name
        self.available = available


class CatalogDatabase:
    """
    Read-only access to the per-brand product collections.

    Takes an async pymongo database (or anything with the same surface).
    """

    def __init__(self, db: Any):
        self.db = db

    @property
    def name(self) -> str:
        return getattr(self.db, "name", MONGO_DB_NAME)

    # ==================== BRANDS ====================

    async def list_brands(self) -> list[str]:
        """Names of all brand collections."""
        names = await self.db.list_collection_names()
        return sorted(name for name in names if not name.startswith("system."))

    async def resolve_brand(self, brand_name: str, exact_first: bool = False) -> Optional[str]:
        """Map a requested brand onto a collection name (case-insensitive)."""
        brands = await self.list_brands()
        if exact_first and brand_name in brands:
            return brand_name
        wanted = brand_name.lower()
        return next((name for name in brands if name.lower() == wanted), None)

    async def _brand_details(self, brand_name: str) -> dict:
        collection = self.db[brand_name]
        count, categories, sample = await asyncio.gather(
            collection.count_documents({}),
            collection.distinct("category"),
            collection.find_one({}),
        )
        image_urls = (sample or {}).get("image_urls") or []

        return {
            "_id": brand_name,
            "name": brand_name,
            "slug": brand_name.lower(),
            "productCount": count,
            "categories": [c for c in categories if c],
            "coverImage": image_urls[0] if image_urls else None,
            "description": f"Explore {brand_name}'s latest collection",
        }

    async def get_all_brands(self) -> list[dict]:
        brands = await self.list_brands()
        return list(await asyncio.gather(*[self._brand_details(name) for name in brands]))

    async def get_brand(self, brand_name: str) -> Optional[dict]:
        collection_name = await self.resolve_brand(brand_name)
        if collection_name is None:
            return None
        return await self._brand_details(collection_name)

    async def get_categories(self) -> list[str]:
        """Sorted union of every brand's non-empty categories."""
        categories: set[str] = set()
        for brand_name in await self.list_brands():
            values = await self.db[brand_name].distinct("category")
            categories.update(c for c in values if c)
        return sorted(categories)

    # ==================== PRODUCTS ====================

    async def _fetch(self, brand_name: str, query: dict) -> list[dict]:
        docs = await self.db[brand_name].find(query).to_list(None)
        return [annotate_product(doc, brand_name) for doc in docs]

    async def query_products(
        self,
        category: Optional[str] = None,
        brand: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: Optional[str] = DEFAULT_SORT,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict:
        """Products across all brands (or one, when brand is given), filtered and paged."""
        brands = await self.list_brands()
        if not brands:
            return empty_page(page)

        if brand:
            matched = next((name for name in brands if name.lower() == brand.lower()), None)
            if matched is None:
                logger.info(f"Unknown brand filter {sanitize_string_for_logging(brand)}")
                return empty_page(page)
            brands = [matched]

        query = build_filter(category=category, search=search)
        products: list[dict] = []
        for brand_name in brands:
            products.extend(await self._fetch(brand_name, query))

        products = filter_price_range(products, min_price, max_price)
        return paginate(sort_products(products, sort), page, limit)

    async def query_brand_products(
        self,
        brand_name: str,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort: Optional[str] = DEFAULT_SORT,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> dict:
        """
        Products of a single brand plus a brand summary block.

        Raises:
            BrandNotFoundError: no collection matches brand_name
        """
        collection_name = await self.resolve_brand(brand_name, exact_first=True)
        if collection_name is None:
            raise BrandNotFoundError(brand_name, await self.list_brands())

        query = build_filter(category=category, search=search, search_fields=("name",))
        products = filter_price_range(await self._fetch(collection_name, query), min_price, max_price)
        result = paginate(sort_products(products, sort), page, limit)

        collection = self.db[collection_name]
        product_count, categories = await asyncio.gather(
            collection.count_documents({}),
            collection.distinct("category"),
        )

        return {
            "brand": {
                "name": collection_name,
                "slug": collection_name.lower(),
                "productCount": product_count,
                "categories": [c for c in categories if c],
            },
            **result,
        }

    async def get_product_by_id(self, product_id: str) -> Optional[dict]:
        """Look the id up in every brand collection. product_id must be a valid ObjectId."""
        object_id = ObjectId(product_id)
        for brand_name in await self.list_brands():
            doc = await self.db[brand_name].find_one({"_id": object_id})
            if doc:
                return to_response(annotate_product(doc, brand_name))
        return None

    async def get_featured(self, limit: int = 8) -> list[dict]:
        """Random picks spread over all brands, shuffled."""
        brands = await self.list_brands()
        if not brands or limit < 1:
            return []

        per_brand = math.ceil(limit / len(brands))
        featured: list[dict] = []
        for brand_name in brands:
            cursor = await self.db[brand_name].aggregate([{"$sample": {"size": per_brand}}])
            docs = await cursor.to_list(None)
            featured.extend(annotate_product(doc, brand_name) for doc in docs)

        random.shuffle(featured)
        return [to_response(p) for p in featured[:limit]]


_catalog: Optional[CatalogDatabase] = None


def get_catalog() -> CatalogDatabase:
    """Get or create the CatalogDatabase singleton."""
    global _catalog
    if _catalog is None:
        _catalog = CatalogDatabase(get_catalog_db())
    return _catalog


def reset_catalog() -> None:
    """Forget the singleton (shutdown and tests)."""
    global _catalog
    _catalog = None

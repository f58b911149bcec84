"""Pytest configuration and fixtures"""
import os
import re

import pytest
from bson import ObjectId

# Set test environment variables
os.environ.setdefault("MONGO_URI", "mongodb://127.0.0.1:27017")
os.environ.setdefault("MONGO_DB_NAME", "brands_test")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")


# ==================== FAKE MONGO ====================

def _matches(doc: dict, query: dict) -> bool:
    """Equality, $regex (+ $options) and $or; enough for catalog queries."""
    for key, cond in query.items():
        if key == "$or":
            if not any(_matches(doc, sub) for sub in cond):
                return False
        elif isinstance(cond, dict) and "$regex" in cond:
            flags = re.IGNORECASE if "i" in cond.get("$options", "") else 0
            value = doc.get(key)
            if not isinstance(value, str) or not re.search(cond["$regex"], value, flags):
                return False
        elif doc.get(key) != cond:
            return False
    return True


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    async def to_list(self, length=None):
        return [dict(d) for d in self.docs]


class FakeCollection:
    def __init__(self, docs):
        self.docs = docs
        self.queries = []

    def find(self, query=None):
        query = query or {}
        self.queries.append(query)
        return FakeCursor([d for d in self.docs if _matches(d, query)])

    async def find_one(self, query=None):
        query = query or {}
        return next((dict(d) for d in self.docs if _matches(d, query)), None)

    async def count_documents(self, query):
        return sum(1 for d in self.docs if _matches(d, query))

    async def distinct(self, field):
        values = []
        for d in self.docs:
            value = d.get(field)
            if value not in values:
                values.append(value)
        return values

    async def aggregate(self, pipeline):
        size = pipeline[0]["$sample"]["size"]
        return FakeCursor(self.docs[:size])


class FakeDatabase:
    name = "brands_test"

    def __init__(self, collections: dict):
        self.collections = {name: FakeCollection(docs) for name, docs in collections.items()}

    async def list_collection_names(self):
        return list(self.collections)

    def __getitem__(self, name):
        return self.collections[name]


# ==================== SAMPLE DATA ====================

def oid(n: int) -> ObjectId:
    return ObjectId(f"65f0000000000000000000{n:02x}")


@pytest.fixture
def catalog_docs():
    """Two brands plus a system collection that must be ignored."""
    return {
        "Khaadi": [
            {
                "_id": oid(1),
                "name": "Lawn Kurta",
                "price": "Rs.3,990",
                "category": "Kurta",
                "brand": "Khaadi",
                "image_urls": ["https://cdn.example.com/khaadi/1.jpg"],
            },
            {
                "_id": oid(2),
                "name": "Embroidered Suit",
                "price": "Rs. 12,500",
                "category": "Unstitched",
                "brand": "Khaadi",
                "image_urls": [],
            },
            {
                "_id": oid(3),
                "name": "Printed Shirt",
                "price": "Rs.2,450",
                "category": "kurta",
                "brand": "Khaadi",
            },
        ],
        "Sapphire": [
            {
                "_id": oid(4),
                "name": "Silk Dupatta",
                "price": "Rs.1,990",
                "category": "Dupatta",
                "brand": "Sapphire",
                "image_urls": ["https://cdn.example.com/sapphire/4.jpg"],
            },
            {
                "_id": oid(5),
                "name": "Khaddar Suit",
                "price": 5500,
                "category": "Unstitched",
                "brand": "Sapphire",
            },
        ],
        "system.views": [],
    }


@pytest.fixture
def fake_db(catalog_docs):
    return FakeDatabase(catalog_docs)


@pytest.fixture
def catalog(fake_db):
    from fashionhive.services.catalog import CatalogDatabase

    return CatalogDatabase(fake_db)


@pytest.fixture
def product_a():
    return {
        "_id": "65f000000000000000000001",
        "name": "Lawn Kurta",
        "price": "Rs.3,990",
        "category": "Kurta",
        "brandCollection": "Khaadi",
        "image_urls": ["https://cdn.example.com/khaadi/1.jpg"],
    }


@pytest.fixture
def product_b():
    return {
        "_id": "65f000000000000000000002",
        "name": "Embroidered Suit",
        "price": "Rs. 12,500",
        "category": "Unstitched",
        "brandCollection": "Khaadi",
    }


@pytest.fixture
def product_c():
    return {
        "_id": "65f000000000000000000004",
        "name": "Silk Dupatta",
        "price": "Rs.1,990",
        "category": "Dupatta",
        "brand": "Sapphire",
    }


@pytest.fixture
def memory_storage():
    from fashionhive.cart import MemoryStorage

    return MemoryStorage()


@pytest.fixture
def engine(memory_storage):
    from fashionhive.cart import CartEngine

    return CartEngine(memory_storage)

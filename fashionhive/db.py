"""
Database Module - MongoDB and Redis Clients

Provides singleton instances of:
- Async MongoDB client for the brand catalog (one collection per brand)
- Sync MongoDB client for scripts
- Upstash Redis client for server-side cart persistence
"""

import os
from typing import Optional

from pymongo import AsyncMongoClient, MongoClient
from pymongo.asynchronous.database import AsyncDatabase
from upstash_redis import Redis


MONGO_URI = os.environ.get("MONGO_URI", "mongodb://127.0.0.1:27017")
MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME", "brands")

# Upstash Redis - standard env var names per docs
UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


# Singleton instances
_mongo_client: Optional[AsyncMongoClient] = None
_sync_mongo_client: Optional[MongoClient] = None
_redis_client: Optional[Redis] = None


def get_mongo() -> AsyncMongoClient:
    """Get async MongoDB client (singleton). The driver connects lazily."""
    global _mongo_client

    if _mongo_client is None:
        if not MONGO_URI:
            raise ValueError("MONGO_URI must be set")
        _mongo_client = AsyncMongoClient(MONGO_URI)

    return _mongo_client


def get_catalog_db() -> AsyncDatabase:
    """Get the catalog database holding one collection per brand."""
    return get_mongo()[MONGO_DB_NAME]


def get_mongo_sync(uri: str | None = None) -> MongoClient:
    """
    Get synchronous MongoDB client (singleton).
    Use for scripts only; an explicit uri bypasses the singleton.
    """
    global _sync_mongo_client

    if uri:
        return MongoClient(uri)

    if _sync_mongo_client is None:
        _sync_mongo_client = MongoClient(MONGO_URI)

    return _sync_mongo_client


async def close_mongo() -> None:
    """Close the async client on shutdown."""
    global _mongo_client

    if _mongo_client is not None:
        await _mongo_client.close()
        _mongo_client = None


def get_redis() -> Redis:
    """
    Get sync Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not UPSTASH_REDIS_REST_URL or not UPSTASH_REDIS_REST_TOKEN:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = Redis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    CART = "cart:"  # cart:{session_id}

    @staticmethod
    def cart_key(session_id: str) -> str:
        return f"{RedisKeys.CART}{session_id}"

"""
Persistent storage backends for the cart.

Any object with load() -> bytes | None and save(bytes) -> bool can back a
CartEngine. Backends report failures through their return values and the log;
they never raise into the engine.
"""
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from fashionhive.db import RedisKeys, get_redis
from fashionhive.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class CartStorage(Protocol):
    """Single-slot byte store holding the serialized cart."""

    def load(self) -> Optional[bytes]:
        ...

    def save(self, data: bytes) -> bool:
        ...


class MemoryStorage:
    """In-process slot. Useful for tests and embedding."""

    def __init__(self, data: Optional[bytes] = None):
        self.data = data
        self.writes = 0

    def load(self) -> Optional[bytes]:
        return self.data

    def save(self, data: bytes) -> bool:
        self.data = data
        self.writes += 1
        return True


class FileStorage:
    """Cart file on local disk (default backend of the CLI)."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning(f"Failed to read cart file {self.path}: {e}")
            return None

    def save(self, data: bytes) -> bool:
        """Write to a temp file in the same directory, then swap it in."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".cart-", suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_name, self.path)
            except OSError:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            return True
        except OSError as e:
            logger.error(f"Failed to write cart file {self.path}: {e}")
            return False


class RedisStorage:
    """
    Cart slot in Upstash Redis, keyed by session id.

    Carts have no expiry: the key lives until the cart is overwritten or the
    store is wiped.
    """

    def __init__(self, session_id: str, redis=None):
        self.key = RedisKeys.cart_key(session_id)
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def load(self) -> Optional[bytes]:
        try:
            data = self.redis.get(self.key)
        except Exception as e:
            logger.error(f"Failed to load cart {sanitize_id_for_logging(self.key)} from Redis: {e}")
            return None

        if data is None:
            return None
        return data.encode("utf-8") if isinstance(data, str) else bytes(data)

    def save(self, data: bytes) -> bool:
        try:
            self.redis.set(self.key, data.decode("utf-8"))
            return True
        except Exception as e:
            logger.error(f"Failed to save cart {sanitize_id_for_logging(self.key)} to Redis: {e}")
            return False

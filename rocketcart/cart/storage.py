"""Durable storage for cart snapshots."""
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

from rocketcart.config import Settings
from rocketcart.db import RedisKeys, get_redis_sync
from rocketcart.errors import ERROR_STORAGE_UNAVAILABLE, CartStorageError
from rocketcart.logging import get_logger

logger = get_logger(__name__)


class PersistentStore(Protocol):
    """Key-value read/write of one serialized cart."""

    def load(self) -> Optional[str]:
        """Return the stored snapshot, or None if nothing was saved yet."""
        ...

    def save(self, snapshot: str) -> None:
        """Replace the stored snapshot. Raises CartStorageError on failure."""
        ...


class MemoryCartStorage:
    """Process-local storage, shared between instances using the same dict."""

    def __init__(self, backend: Optional[dict] = None, key: str = "cart") -> None:
        self._backend = backend if backend is not None else {}
        self.key = key

    def load(self) -> Optional[str]:
        return self._backend.get(self.key)

    def save(self, snapshot: str) -> None:
        self._backend[self.key] = snapshot


class FileCartStorage:
    """
    JSON file storage.

    Writes go to a temp file in the target directory which then replaces the
    snapshot, so a failed write keeps the previous snapshot intact.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def load(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Failed to read cart snapshot {self.path}: {e}")
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e

    def save(self, snapshot: str) -> None:
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(snapshot)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Failed to write cart snapshot {self.path}: {e}")
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e


class RedisCartStorage:
    """Upstash Redis storage; a single SET replaces the snapshot."""

    def __init__(self, storage_key: str, redis=None, ttl_seconds: Optional[int] = None) -> None:
        self.key = RedisKeys.cart_key(storage_key)
        self.ttl_seconds = ttl_seconds or None
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        """Get Redis client (lazy initialization)."""
        if self._redis is None:
            try:
                self._redis = get_redis_sync()
            except ValueError as e:
                raise CartStorageError(f"Redis not available: {e}") from e
        return self._redis

    def load(self) -> Optional[str]:
        try:
            data = self.redis.get(self.key)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to get cart from Redis: {e}")
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e
        return data or None

    def save(self, snapshot: str) -> None:
        try:
            self.redis.set(self.key, snapshot, ex=self.ttl_seconds)
        except CartStorageError:
            raise
        except Exception as e:
            logger.error(f"Failed to save cart to Redis: {e}")
            raise CartStorageError(f"{ERROR_STORAGE_UNAVAILABLE}: {e}") from e


def build_storage(settings: Settings) -> PersistentStore:
    """Create the storage backend selected by CART_STORAGE_BACKEND."""
    if settings.storage_backend == "file":
        return FileCartStorage(settings.storage_path)
    if settings.storage_backend == "redis":
        return RedisCartStorage(settings.storage_key, ttl_seconds=settings.cart_ttl_seconds)
    return MemoryCartStorage(key=settings.storage_key)

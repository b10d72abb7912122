"""Key-value stores for layout persistence."""

import logging
import os
from typing import Optional, Union

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger("gridboard.store")


class PersistenceError(Exception):
    """A store read or write failed."""

    def __init__(self, message: str, operation: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.operation = operation  # "read", "write" or "delete"
        self.cause = cause


class StoreConfig:
    """Store configuration."""

    def __init__(
        self,
        redis_url: str | None = None,
        prefix: str = "gridboard:",
        default_ttl: int | None = None,
    ):
        self.redis_url = redis_url if redis_url is not None else os.getenv("REDIS_URL", "")
        self.prefix = prefix
        # Layouts do not expire unless a TTL is configured
        self.default_ttl = default_ttl


class InMemoryStore:
    """Process-local store, used for development and tests."""

    def __init__(self, config: StoreConfig | None = None):
        self.config = config or StoreConfig(redis_url="")
        self._data: dict[str, str] = {}
        self._prefix = self.config.prefix

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        """Get value from store."""
        return self._data.get(self._full_key(key))

    async def set(self, key: str, value: str) -> bool:
        """Set value in store."""
        self._data[self._full_key(key)] = value
        return True

    async def delete(self, key: str) -> bool:
        """Delete value from store."""
        return self._data.pop(self._full_key(key), None) is not None

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        return self._full_key(key) in self._data

    async def clear(self) -> bool:
        """Clear all entries."""
        self._data.clear()
        return True

    async def close(self) -> None:
        return None


class RedisStore:
    """Redis store implementation."""

    def __init__(self, config: StoreConfig, client: aioredis.Redis | None = None):
        self.config = config
        self._client = client or aioredis.from_url(
            config.redis_url,
            decode_responses=True,
        )
        self._prefix = config.prefix

    def _full_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        """Get value from store."""
        full_key = self._full_key(key)
        try:
            return await self._client.get(full_key)
        except RedisError as e:
            raise PersistenceError(f"Failed to read {full_key}", "read", e) from e

    async def set(self, key: str, value: str) -> bool:
        """Set value in store."""
        full_key = self._full_key(key)
        try:
            if self.config.default_ttl:
                return bool(await self._client.setex(full_key, self.config.default_ttl, value))
            return bool(await self._client.set(full_key, value))
        except RedisError as e:
            raise PersistenceError(f"Failed to write {full_key}", "write", e) from e

    async def delete(self, key: str) -> bool:
        """Delete value from store."""
        full_key = self._full_key(key)
        try:
            return bool(await self._client.delete(full_key))
        except RedisError as e:
            raise PersistenceError(f"Failed to delete {full_key}", "delete", e) from e

    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        full_key = self._full_key(key)
        try:
            return bool(await self._client.exists(full_key))
        except RedisError as e:
            raise PersistenceError(f"Failed to read {full_key}", "read", e) from e

    async def clear(self) -> bool:
        """Clear all entries with prefix."""
        try:
            keys = [key async for key in self._client.scan_iter(match=f"{self._prefix}*")]
            if keys:
                await self._client.delete(*keys)
        except RedisError as e:
            raise PersistenceError(f"Failed to clear {self._prefix}*", "delete", e) from e
        return True

    async def ping(self) -> bool:
        """Check the connection."""
        try:
            return bool(await self._client.ping())
        except RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()


LayoutStore = Union[InMemoryStore, RedisStore]


def get_store(config: StoreConfig | None = None) -> LayoutStore:
    """Get store instance.

    Returns a Redis store when a Redis URL is configured, otherwise an
    in-memory store.
    """
    config = config or StoreConfig()

    if config.redis_url:
        logger.info(f"Using Redis layout store (prefix {config.prefix!r})")
        return RedisStore(config)

    logger.info("Using in-memory layout store")
    return InMemoryStore(config)

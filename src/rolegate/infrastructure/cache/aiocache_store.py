"""aiocache-backed implementation of the cache port."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from aiocache import Cache
from aiocache.serializers import JsonSerializer

from rolegate.domain.exceptions import CacheUnavailable

logger = logging.getLogger(__name__)


class AiocacheStore:
    """Read-through cache over an aiocache backend (memory or Redis).

    Read and write failures are logged and treated as misses so that
    authorization keeps working from the database while the backend is down.
    """

    def __init__(self, cache: Cache) -> None:
        self._cache = cache

    async def get(self, key: str) -> Any | None:
        try:
            return await self._cache.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._cache.set(key, value, ttl=ttl)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    async def remember(
        self, key: str, ttl: int, compute: Callable[[], Awaitable[Any]]
    ) -> Any:
        """Cached value of key, computing and storing it on a miss."""
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await compute()
        await self.set(key, value, ttl)
        return value

    async def invalidate(self, keys: list[str]) -> None:
        for key in keys:
            try:
                await self._cache.delete(key)
            except Exception as e:
                logger.warning("Cache invalidation failed for %s: %s", key, e)

    async def increment(self, key: str, ttl: int) -> int:
        """Counter + 1. The first increment creates the key with ``ttl``."""
        try:
            try:
                await self._cache.add(key, 1, ttl=ttl)
                return 1
            except ValueError:
                # key exists: window already running
                count = int(await self._cache.increment(key, 1))
            if count == 1:
                # key expired after add failed; increment recreated it without ttl
                await self._cache.expire(key, ttl)
            return count
        except Exception as e:
            logger.warning("Cache counter %s unavailable: %s", key, e)
            raise CacheUnavailable(str(e)) from e

    async def close(self) -> None:
        await self._cache.close()


def create_cache(
    backend: str,
    redis_host: str = "localhost",
    redis_port: int = 6379,
    redis_password: str | None = None,
    redis_db: int = 0,
    namespace: str = "rolegate",
) -> AiocacheStore | None:
    """Build the cache store for ``backend`` (``memory``, ``redis`` or ``none``)."""
    if backend == "none":
        return None
    if backend == "memory":
        return AiocacheStore(Cache(Cache.MEMORY, namespace=namespace))
    if backend == "redis":
        return AiocacheStore(
            Cache(
                Cache.REDIS,
                endpoint=redis_host,
                port=redis_port,
                password=redis_password or None,
                db=redis_db,
                pool_max_size=10,
                namespace=namespace,
                serializer=JsonSerializer(),
            )
        )
    raise ValueError(f"Unknown cache backend: {backend}")

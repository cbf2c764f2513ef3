"""Lifespan middleware - opens the pool on startup, releases pool and cache on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

from rolegate.application.ports import CacheStore

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Opens the connection pool on ASGI startup; closes pool and cache on shutdown."""

    def __init__(self, pool: AsyncConnectionPool, cache: CacheStore | None = None) -> None:
        self._pool = pool
        self._cache = cache

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        await self._pool.open()
        logger.info("Database pool opened")

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        if self._cache is not None:
            await self._cache.close()
        await self._pool.close()
        logger.info("Database pool closed")

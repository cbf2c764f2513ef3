"""Cache port - read-through cache of derived authorization state."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol


class CacheStore(Protocol):
    """Port for the key/value cache with TTLs.

    Values are JSON-compatible. ``get``/``set``/``remember``/``invalidate``
    swallow backend failures (the cache is an optimization); ``increment``
    raises CacheUnavailable so callers can apply their own policy.
    """

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int) -> None: ...

    async def remember(
        self, key: str, ttl: int, compute: Callable[[], Awaitable[Any]]
    ) -> Any: ...

    async def invalidate(self, keys: list[str]) -> None: ...

    async def increment(self, key: str, ttl: int) -> int:
        """Atomically add 1 to counter, creating it with ``ttl`` when absent."""
        ...

    async def close(self) -> None: ...

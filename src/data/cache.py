"""Redis-backed JSON cache client.

The client never raises on store failures: an unreachable Redis behaves
like an empty cache, and every failed operation is logged.
"""

from __future__ import annotations

import json

from typing import TYPE_CHECKING, Any

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.helpers.constants import CONNECTION_TIMEOUT
from src.helpers.errors import CacheUnavailableError
from src.helpers.logging import get_logger
from src.helpers.metrics import CACHE_LOOKUPS


if TYPE_CHECKING:
    from collections.abc import Awaitable

    from src.helpers.config import RedisSettings


logger = get_logger(__name__)


def block_key(block_hash: str) -> str:
    """Cache key for a block."""
    return f"block:{block_hash}"


def address_key(address: str) -> str:
    """Cache key for all transactions of an address."""
    return f"address:{address}"


def blocks_by_date_key(epoch_millis: int) -> str:
    """Cache key for the block listing of a day."""
    return f"blocksByDate:{epoch_millis}"


def total_energy_key(epoch_millis: int) -> str:
    """Cache key for the energy total of a day."""
    return f"totalEnergyConsumption:{epoch_millis}"


class CacheClient:
    """JSON get/set over a Redis connection."""

    def __init__(self, redis: Redis, *, available: bool = True) -> None:
        """Initialize cache client.

        Args:
            redis: Redis connection (decode_responses must be enabled)
            available: Whether the store answered when the client was built
        """
        self.redis = redis
        self.available = available

    @classmethod
    async def connect(cls, settings: RedisSettings) -> CacheClient:
        """Create a client and check that the store is reachable.

        A failed ping does not raise. The returned client is flagged
        unavailable and later operations keep degrading to misses until
        Redis answers again.

        Args:
            settings: Redis connection parameters

        Returns:
            CacheClient instance
        """
        redis = Redis(
            host=settings.host,
            port=settings.port,
            password=settings.password,
            decode_responses=True,
            socket_connect_timeout=CONNECTION_TIMEOUT,
        )
        client = cls(redis)
        try:
            await client._execute("ping", redis.ping())
            logger.info("Connected to Redis at %s:%s", settings.host, settings.port)
        except CacheUnavailableError as e:
            logger.error("Failed to connect to Redis: %s", e)
            client.available = False
        return client

    async def _execute(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await awaitable
        except (RedisError, OSError) as e:
            msg = f"Redis {operation} failed: {e}"
            raise CacheUnavailableError(msg) from e

    async def get(self, key: str) -> Any | None:
        """Get a cached value.

        Args:
            key: Cache key

        Returns:
            Decoded JSON value, or None when absent, undecodable or the store
            is unreachable. A stored ``0`` or ``[]`` is returned as is.
        """
        try:
            raw = await self._execute("GET", self.redis.get(key))
        except CacheUnavailableError as e:
            logger.warning("Cache read for %s failed: %s", key, e)
            CACHE_LOOKUPS.labels(outcome="error").inc()
            return None

        if raw is None:
            logger.debug("Cache miss for key: %s", key)
            CACHE_LOOKUPS.labels(outcome="miss").inc()
            return None

        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("Discarding undecodable cache entry for %s", key)
            CACHE_LOOKUPS.labels(outcome="error").inc()
            return None

        logger.debug("Cache hit for key: %s", key)
        CACHE_LOOKUPS.labels(outcome="hit").inc()
        return value

    async def set(self, key: str, value: Any) -> bool:
        """Store a value, overwriting any previous entry.

        Args:
            key: Cache key
            value: JSON-serializable value

        Returns:
            True if the store acknowledged the write
        """
        payload = json.dumps(value)
        try:
            await self._execute("SET", self.redis.set(key, payload))
        except CacheUnavailableError as e:
            logger.warning("Cache write for %s failed: %s", key, e)
            return False

        logger.debug("Data cached for key: %s", key)
        return True

    async def close(self) -> None:
        """Close the underlying Redis connection pool."""
        await self.redis.aclose()


__all__ = [
    "CacheClient",
    "address_key",
    "block_key",
    "blocks_by_date_key",
    "total_energy_key",
]

"""Tests for the Redis cache client."""

from __future__ import annotations

import json

import pytest

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock, patch

from redis.exceptions import ConnectionError as RedisConnectionError

from src.data.cache import (
    CacheClient,
    address_key,
    block_key,
    blocks_by_date_key,
    total_energy_key,
)
from src.helpers.config import RedisSettings


if TYPE_CHECKING:
    from tests.payloads import FakeRedis


def unreachable_redis() -> MagicMock:
    """Mock Redis whose every command fails to connect."""
    redis = MagicMock()
    error = RedisConnectionError("Connection refused")
    redis.ping = AsyncMock(side_effect=error)
    redis.get = AsyncMock(side_effect=error)
    redis.set = AsyncMock(side_effect=error)
    redis.aclose = AsyncMock()
    return redis


class TestCacheKeys:
    """Tests for cache key builders."""

    def test_keys_are_prefixed_by_entity(self) -> None:
        """Test each entity type has its own key prefix."""
        assert block_key("abc") == "block:abc"
        assert address_key("1xyz") == "address:1xyz"
        assert blocks_by_date_key(1_700_000_000_000) == "blocksByDate:1700000000000"
        assert total_energy_key(1_700_000_000_000) == (
            "totalEnergyConsumption:1700000000000"
        )

    def test_same_identifier_different_types_do_not_collide(self) -> None:
        """Test an identifier used by two entity types yields two keys."""
        assert block_key("42") != address_key("42")


class TestCacheClient:
    """Tests for CacheClient get/set."""

    @pytest.mark.asyncio
    async def test_get_absent_returns_none(self, cache: CacheClient) -> None:
        """Test a missing key is reported as None."""
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache: CacheClient, fake_redis: FakeRedis) -> None:
        """Test values are stored as JSON and decoded on read."""
        value = {"hash": "abc", "transactions": [{"hash": "t", "energyCost": 1.0}]}

        assert await cache.set("block:abc", value) is True
        assert json.loads(fake_redis.data["block:abc"]) == value
        assert await cache.get("block:abc") == value

    @pytest.mark.asyncio
    async def test_zero_is_present(self, cache: CacheClient) -> None:
        """Test a stored 0 is returned as 0, not as absent."""
        await cache.set("totalEnergyConsumption:1", 0)

        assert await cache.get("totalEnergyConsumption:1") == 0

    @pytest.mark.asyncio
    async def test_empty_list_is_present(self, cache: CacheClient) -> None:
        """Test a stored empty list is returned as a list."""
        await cache.set("blocksByDate:1", [])

        assert await cache.get("blocksByDate:1") == []

    @pytest.mark.asyncio
    async def test_set_overwrites(self, cache: CacheClient) -> None:
        """Test a second write replaces the first."""
        await cache.set("k", 1)
        await cache.set("k", 2)

        assert await cache.get("k") == 2

    @pytest.mark.asyncio
    async def test_undecodable_entry_is_a_miss(
        self, cache: CacheClient, fake_redis: FakeRedis
    ) -> None:
        """Test a corrupt entry is treated as absent."""
        fake_redis.data["k"] = "{not json"

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_unreachable_store_is_always_miss(self) -> None:
        """Test reads against a dead store return None instead of raising."""
        cache = CacheClient(unreachable_redis())

        assert await cache.get("block:abc") is None

    @pytest.mark.asyncio
    async def test_unreachable_store_write_is_not_acknowledged(self) -> None:
        """Test writes against a dead store return False instead of raising."""
        cache = CacheClient(unreachable_redis())

        assert await cache.set("block:abc", {"a": 1}) is False

    @pytest.mark.asyncio
    async def test_failed_operation_is_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test every failed operation leaves a warning."""
        import logging

        caplog.set_level(logging.WARNING)
        cache = CacheClient(unreachable_redis())

        await cache.get("block:abc")
        await cache.set("block:abc", 1)

        assert "Cache read for block:abc failed" in caplog.text
        assert "Cache write for block:abc failed" in caplog.text


class TestCacheClientConnect:
    """Tests for CacheClient.connect."""

    @pytest.mark.asyncio
    async def test_connect_passes_settings(self) -> None:
        """Test connection parameters come from the settings."""
        redis = MagicMock()
        redis.ping = AsyncMock(return_value=True)
        settings = RedisSettings(host="cache.local", port=6380, password="secret")

        with patch("src.data.cache.Redis", return_value=redis) as redis_cls:
            cache = await CacheClient.connect(settings)

        kwargs = redis_cls.call_args.kwargs
        assert kwargs["host"] == "cache.local"
        assert kwargs["port"] == 6380
        assert kwargs["password"] == "secret"
        assert kwargs["decode_responses"] is True
        assert cache.available is True

    @pytest.mark.asyncio
    async def test_connect_failure_is_not_fatal(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test an unreachable store yields an unavailable client, not an error."""
        import logging

        caplog.set_level(logging.ERROR)

        with patch("src.data.cache.Redis", return_value=unreachable_redis()):
            cache = await CacheClient.connect(RedisSettings())

        assert cache.available is False
        assert "Failed to connect to Redis" in caplog.text
        assert await cache.get("anything") is None

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        """Test close releases the connection pool."""
        redis = unreachable_redis()
        cache = CacheClient(redis)

        await cache.close()

        redis.aclose.assert_awaited_once()

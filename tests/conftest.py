"""Pytest configuration and shared fixtures for the energy API tests."""

from __future__ import annotations

import pytest
import pytest_asyncio

from typing import TYPE_CHECKING

from src.data.aggregator import EnergyAggregator
from src.data.cache import CacheClient
from src.data.upstream import BlockchainClient
from src.helpers.http import create_http_client
from tests.payloads import API_URL, NOW, FakeRedis


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    import httpx
    from pytest_httpx import HTTPXMock


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Provide an empty in-memory Redis."""
    return FakeRedis()


@pytest.fixture
def cache(fake_redis: FakeRedis) -> CacheClient:
    """Provide a cache client over the in-memory Redis."""
    return CacheClient(fake_redis)  # type: ignore[arg-type]


@pytest_asyncio.fixture
async def http_client() -> AsyncGenerator[httpx.AsyncClient]:
    """Provide an HTTP client closed after the test."""
    async with create_http_client(timeout=5.0) as client:
        yield client


@pytest.fixture
def upstream(http_client: httpx.AsyncClient) -> BlockchainClient:
    """Provide an upstream client pointed at the test API URL."""
    return BlockchainClient(http_client, base_url=API_URL)


@pytest.fixture
def aggregator(
    httpx_mock: HTTPXMock, upstream: BlockchainClient, cache: CacheClient
) -> EnergyAggregator:
    """Provide an aggregator with mocked HTTP and a fixed clock.

    Depending on httpx_mock means any unexpected upstream request fails.
    """
    return EnergyAggregator(upstream, cache, clock=lambda: NOW)

"""Fetch-aggregate-cache pipeline behind the energy queries.

Every operation reads through the cache first. Single-item operations fail
with ``UpstreamFetchError`` when upstream fails; batch operations replace a
failed sub-unit (address page, block, day) with an empty or zero result so
the caller always gets a complete answer.
"""

from __future__ import annotations

import math
import time
from datetime import UTC, datetime

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from src.data.cache import (
    address_key,
    block_key,
    blocks_by_date_key,
    total_energy_key,
)
from src.data.energy import energy_cost, to_transaction
from src.data.models import AddressTransactionSet, Block, BlockRef, Transaction
from src.helpers.concurrency import gather_bounded, swallow_errors
from src.helpers.constants import (
    ADDRESS_PAGE_CONCURRENCY,
    ADDRESS_PAGE_SIZE,
    BLOCK_ENERGY_CONCURRENCY,
    DAILY_TOTAL_CONCURRENCY,
    MILLIS_PER_DAY,
)
from src.helpers.errors import (
    InvalidUpstreamShapeError,
    TransportError,
    UpstreamFetchError,
)
from src.helpers.logging import get_logger
from src.helpers.metrics import record_swallowed_error


if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from src.data.cache import CacheClient
    from src.data.models import RawBlock
    from src.data.upstream import BlockchainClient


logger = get_logger(__name__)


def utc_midnight_millis(now: datetime | None = None) -> int:
    """Epoch milliseconds of the most recent UTC midnight."""
    now = now or datetime.now(UTC)
    midnight = now.astimezone(UTC).replace(hour=0, minute=0, second=0, microsecond=0)
    return int(midnight.timestamp()) * 1000


def build_block(raw: RawBlock) -> Block:
    """Map an upstream block to the cached Block shape."""
    return Block(
        hash=raw.hash,
        index=raw.height,
        time=raw.time,
        size=raw.size,
        transactions=[to_transaction(tx) for tx in raw.tx],
    )


class EnergyAggregator:
    """Energy queries over an upstream client and a cache."""

    def __init__(
        self,
        upstream: BlockchainClient,
        cache: CacheClient,
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            upstream: blockchain.info client
            cache: Cache client shared by all operations
            clock: Returns the current time; used to find today's UTC midnight
        """
        self.upstream = upstream
        self.cache = cache
        self.clock = clock or (lambda: datetime.now(UTC))

    async def _cached_block(self, block_hash: str) -> Block | None:
        cached = await self.cache.get(block_key(block_hash))
        if cached is None:
            return None
        try:
            return Block.model_validate(cached)
        except ValidationError:
            logger.warning("Ignoring malformed cache entry for block %s", block_hash)
            return None

    async def _load_block(self, block_hash: str) -> Block:
        """Return a block from cache, fetching and caching it on a miss.

        Raises:
            TransportError: If the upstream request fails
            InvalidUpstreamShapeError: If upstream returned something else
        """
        block = await self._cached_block(block_hash)
        if block is not None:
            return block

        raw = await self.upstream.raw_block(block_hash)
        block = build_block(raw)
        await self.cache.set(block_key(block_hash), block.model_dump(by_alias=True))
        return block

    async def fetch_block_transactions(
        self, block_hash: str, limit: int, offset: int
    ) -> list[Transaction]:
        """Transactions of a block with their energy cost, paginated.

        The full transaction list is cached, so any later page of the same
        block is served from the cache.

        Args:
            block_hash: Block hash
            limit: Maximum number of transactions to return
            offset: Index of the first transaction to return

        Returns:
            ``transactions[offset:offset + limit]``; empty when out of range

        Raises:
            UpstreamFetchError: If the block is not cached and cannot be fetched
        """
        try:
            block = await self._load_block(block_hash)
        except (TransportError, InvalidUpstreamShapeError) as e:
            logger.error("Failed to fetch block %s: %s", block_hash, e)
            raise UpstreamFetchError("block", block_hash, str(e)) from e

        start = max(offset, 0)
        return block.transactions[start : start + max(limit, 0)]

    async def fetch_all_transactions_for_address(
        self, address: str
    ) -> list[Transaction]:
        """Every transaction of an address with its energy cost.

        Pages are fetched strictly one after another in increasing offset
        order. A page that fails contributes no transactions.

        Raises:
            UpstreamFetchError: If the transaction count cannot be fetched
        """
        cache_key = address_key(address)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            try:
                return AddressTransactionSet.model_validate(cached).transactions
            except ValidationError:
                logger.warning("Ignoring malformed cache entry for %s", cache_key)

        try:
            first = await self.upstream.raw_address(address, offset=0, limit=1)
        except (TransportError, InvalidUpstreamShapeError) as e:
            logger.error("Failed to fetch transaction count for %s: %s", address, e)
            raise UpstreamFetchError("transactions for address", address, str(e)) from e

        total_pages = math.ceil(first.n_tx / ADDRESS_PAGE_SIZE)
        logger.info(
            "Fetching %d transactions for %s in %d pages",
            first.n_tx,
            address,
            total_pages,
        )

        @swallow_errors("address_page", list)
        async def fetch_page(page_offset: int) -> list[Transaction]:
            page = await self.upstream.raw_address(
                address, offset=page_offset, limit=ADDRESS_PAGE_SIZE
            )
            return [to_transaction(tx) for tx in page.txs]

        pages = await gather_bounded(
            ADDRESS_PAGE_CONCURRENCY,
            [fetch_page(i * ADDRESS_PAGE_SIZE) for i in range(total_pages)],
        )
        transactions = [tx for page in pages for tx in page]

        entry = AddressTransactionSet(
            transactions=transactions, timestamp=int(time.time() * 1000)
        )
        await self.cache.set(cache_key, entry.model_dump(by_alias=True))
        return transactions

    async def total_energy_consumption_by_address(self, address: str) -> float:
        """Sum of the energy cost of every transaction of an address."""
        transactions = await self.fetch_all_transactions_for_address(address)
        return sum((tx.energy_cost for tx in transactions), 0.0)

    async def fetch_block_data_by_date(self, epoch_millis: int) -> list[Any]:
        """Blocks mined on the day starting at ``epoch_millis``.

        The upstream listing is cached as is.

        Raises:
            InvalidUpstreamShapeError: If upstream did not return a list
            UpstreamFetchError: If the request fails
        """
        cache_key = blocks_by_date_key(epoch_millis)
        cached = await self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        try:
            blocks = await self.upstream.blocks_for_date(epoch_millis)
        except TransportError as e:
            raise UpstreamFetchError("blocks for date", str(epoch_millis), str(e)) from e

        if not isinstance(blocks, list):
            msg = f"No blocks data returned for date {epoch_millis}"
            raise InvalidUpstreamShapeError(msg)

        logger.info(
            "Fetched %d blocks for %s",
            len(blocks),
            datetime.fromtimestamp(epoch_millis / 1000, tz=UTC).isoformat(),
        )
        await self.cache.set(cache_key, blocks)
        return blocks

    async def total_energy_consumption(
        self, blocks: Sequence[BlockRef | dict[str, Any]]
    ) -> float:
        """Sum of the energy cost of whole blocks, computed from block size.

        Up to 20 blocks are looked up concurrently. A block without a size,
        or one that cannot be fetched, contributes 0.
        """

        @swallow_errors("block_energy", float)
        async def block_energy(ref: BlockRef | dict[str, Any]) -> float:
            block_hash = (
                ref.hash if isinstance(ref, BlockRef) else BlockRef.model_validate(ref).hash
            )
            block = await self._load_block(block_hash)
            if not block.size:
                return 0.0
            return energy_cost(block.size)

        costs = await gather_bounded(
            BLOCK_ENERGY_CONCURRENCY, [block_energy(ref) for ref in blocks]
        )
        return sum(costs, 0.0)

    async def _day_total(self, epoch_millis: int) -> float:
        cache_key = total_energy_key(epoch_millis)
        cached = await self.cache.get(cache_key)
        if isinstance(cached, int | float) and not isinstance(cached, bool):
            return float(cached)
        if cached is not None:
            logger.warning("Ignoring malformed cache entry for %s", cache_key)

        try:
            blocks = await self.fetch_block_data_by_date(epoch_millis)
            if blocks:
                total = await self.total_energy_consumption(blocks)
            else:
                logger.info("No blocks found for date %d", epoch_millis)
                total = 0.0
        except Exception as e:
            logger.warning("Error processing date %d: %s", epoch_millis, e)
            record_swallowed_error("daily_total")
            total = 0.0

        await self.cache.set(cache_key, total)
        return total

    async def total_energy_consumption_per_day(self, days: int) -> list[float]:
        """Energy totals for the last ``days`` UTC days, today first.

        Up to 5 days are computed concurrently. Failures are cached and
        returned as 0 for that day.
        """
        today = utc_midnight_millis(self.clock())
        day_starts = [today - i * MILLIS_PER_DAY for i in range(max(days, 0))]
        return await gather_bounded(
            DAILY_TOTAL_CONCURRENCY, [self._day_total(ms) for ms in day_starts]
        )


__all__ = [
    "EnergyAggregator",
    "build_block",
    "utc_midnight_millis",
]

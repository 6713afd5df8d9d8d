"""GraphQL schema exposing the energy queries."""

import strawberry

from src.data import models
from src.data.aggregator import EnergyAggregator
from src.helpers.constants import DEFAULT_BLOCK_PAGE_LIMIT


HELLO_MESSAGE = "Blockchain energy API is up"


@strawberry.type(description="Transaction with its derived energy cost")
class Transaction:
    hash: str
    energy_cost: float

    @classmethod
    def from_model(cls, tx: models.Transaction) -> "Transaction":
        return cls(hash=tx.hash, energy_cost=tx.energy_cost)


def get_aggregator(info: strawberry.Info) -> EnergyAggregator:
    """Aggregator for the current request, taken from the GraphQL context."""
    context = info.context
    if isinstance(context, dict):
        return context["aggregator"]
    return context.aggregator


@strawberry.type
class Query:
    @strawberry.field(description="Liveness check")
    def hello(self) -> str:
        return HELLO_MESSAGE

    @strawberry.field(
        description="Energy consumption per transaction for a specific block"
    )
    async def energy_consumption_for_block(
        self,
        info: strawberry.Info,
        block_hash: str,
        limit: int | None = DEFAULT_BLOCK_PAGE_LIMIT,
        offset: int | None = 0,
    ) -> list[Transaction]:
        transactions = await get_aggregator(info).fetch_block_transactions(
            block_hash,
            limit=DEFAULT_BLOCK_PAGE_LIMIT if limit is None else limit,
            offset=offset or 0,
        )
        return [Transaction.from_model(tx) for tx in transactions]

    @strawberry.field(
        description="Total energy consumption per day over the last `days` days, today first"
    )
    async def total_energy_consumption_per_day(
        self, info: strawberry.Info, days: int
    ) -> list[float]:
        return await get_aggregator(info).total_energy_consumption_per_day(days)

    @strawberry.field(
        description="Total energy consumption of all transactions of a wallet address"
    )
    async def total_energy_consumption_by_address(
        self, info: strawberry.Info, address: str
    ) -> float:
        return await get_aggregator(info).total_energy_consumption_by_address(address)


schema = strawberry.Schema(query=Query)


__all__ = ["HELLO_MESSAGE", "Query", "Transaction", "schema"]

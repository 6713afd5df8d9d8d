"""Pydantic models for upstream payloads and cached energy data."""

from pydantic import BaseModel, ConfigDict, Field


class RawTransaction(BaseModel):
    """Transaction entry as returned by rawblock and rawaddr."""

    hash: str = Field(..., description="Transaction hash")
    size: int = Field(default=0, description="Serialized size in bytes")

    model_config = ConfigDict(extra="ignore")


class RawBlock(BaseModel):
    """Block payload returned by the rawblock endpoint."""

    hash: str = Field(..., description="Block hash")
    height: int = Field(..., description="Block height")
    time: int = Field(..., description="Block timestamp (unix seconds)")
    size: int | None = Field(default=None, description="Block size in bytes")
    tx: list[RawTransaction] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class RawAddress(BaseModel):
    """One page of the rawaddr endpoint."""

    n_tx: int = Field(..., description="Total number of transactions for the address")
    txs: list[RawTransaction] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class Transaction(BaseModel):
    """Transaction with its derived energy cost."""

    hash: str
    energy_cost: float = Field(..., alias="energyCost")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Block(BaseModel):
    """Block with per-transaction energy costs, in upstream order.

    This is the single shape stored under ``block:<hash>``. ``size`` is the
    whole block size and is None when upstream did not report it.
    """

    hash: str
    index: int
    time: int
    size: int | None = None
    transactions: list[Transaction] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class AddressTransactionSet(BaseModel):
    """Every transaction of an address plus the time it was captured.

    ``timestamp`` is informational only; cached sets never expire.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    timestamp: int = Field(..., description="Capture time in epoch milliseconds")


class BlockRef(BaseModel):
    """Block reference from the blocks-by-date listing."""

    hash: str

    model_config = ConfigDict(extra="ignore")


__all__ = [
    "AddressTransactionSet",
    "Block",
    "BlockRef",
    "RawAddress",
    "RawBlock",
    "RawTransaction",
    "Transaction",
]

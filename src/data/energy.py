"""Energy model: converts byte sizes into synthetic energy cost."""

from src.data.models import RawTransaction, Transaction
from src.helpers.constants import ENERGY_COST_PER_BYTE


def energy_cost(size_bytes: float) -> float:
    """Energy cost of ``size_bytes`` bytes of chain data.

    Example:
        >>> energy_cost(250)
        1140.0
    """
    return size_bytes * ENERGY_COST_PER_BYTE


def to_transaction(raw: RawTransaction) -> Transaction:
    """Map an upstream transaction to its energy-costed form."""
    return Transaction(hash=raw.hash, energy_cost=energy_cost(raw.size))


__all__ = ["energy_cost", "to_transaction"]

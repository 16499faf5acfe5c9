"""Data models for pool events and operation results."""

from amm.models.events import LiquidityAdded, LiquidityRemoved, PoolEvent, Swapped, Synced
from amm.models.results import AddLiquidityResult, RemoveLiquidityResult, SwapResult
from amm.models.types import Address, Amount, is_valid_address, normalize_address

__all__ = [
    # Types
    "Address",
    "Amount",
    "normalize_address",
    "is_valid_address",
    # Events
    "PoolEvent",
    "LiquidityAdded",
    "LiquidityRemoved",
    "Swapped",
    "Synced",
    # Results
    "AddLiquidityResult",
    "RemoveLiquidityResult",
    "SwapResult",
]

"""Single-pair constant product pool."""

from amm.pool.engine import EventCallback, LiquidityPool
from amm.pool.guard import EntryGuard
from amm.pool.state import PoolState

__all__ = [
    "LiquidityPool",
    "PoolState",
    "EntryGuard",
    "EventCallback",
]

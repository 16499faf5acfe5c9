"""Constant product AMM pool engine."""

from amm.clock import Clock, ManualClock, SystemClock
from amm.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm.ledger import InMemoryLedger, Ledger, Token
from amm.pool import LiquidityPool, PoolState

__version__ = "0.1.0"
__all__ = [
    "LiquidityPool",
    "PoolState",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    "Ledger",
    "Token",
    "InMemoryLedger",
    "Clock",
    "SystemClock",
    "ManualClock",
    "__version__",
]

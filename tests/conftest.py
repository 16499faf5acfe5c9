"""Pytest configuration and fixtures."""

import pytest

from amm.clock import ManualClock
from amm.config import PoolConfig
from amm.ledger import InMemoryLedger
from amm.pool import LiquidityPool
from tests.helpers import ALICE, NOW, POOL, TOKEN_A, TOKEN_B, deposit


@pytest.fixture
def ledger() -> InMemoryLedger:
    """An empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def clock() -> ManualClock:
    """A clock frozen at NOW."""
    return ManualClock(NOW)


@pytest.fixture
def config() -> PoolConfig:
    """Default pool configuration (30 bps fee)."""
    return PoolConfig()


@pytest.fixture
def pool(ledger: InMemoryLedger, clock: ManualClock, config: PoolConfig) -> LiquidityPool:
    """An empty TOKEN_A/TOKEN_B pool."""
    return LiquidityPool(
        address=POOL,
        token_a=TOKEN_A,
        token_b=TOKEN_B,
        ledger=ledger,
        clock=clock,
        config=config,
    )


@pytest.fixture
def seeded_pool(pool: LiquidityPool) -> LiquidityPool:
    """Pool bootstrapped by ALICE with reserves (1000, 4000) and 2000 claim tokens."""
    deposit(pool, ALICE, 1000, 4000)
    return pool

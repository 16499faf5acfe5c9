"""Test helpers module for shared test utilities.

- constants: Pool, token and user addresses, clock values
- factories: Ledger funding and deposit helpers
"""

from tests.helpers.constants import (
    ALICE,
    BOB,
    CAROL,
    DEADLINE,
    NOW,
    POOL,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
)
from tests.helpers.factories import deposit, fund, snapshot

__all__ = [
    # Constants
    "POOL",
    "TOKEN_A",
    "TOKEN_B",
    "TOKEN_C",
    "ALICE",
    "BOB",
    "CAROL",
    "NOW",
    "DEADLINE",
    # Factories
    "fund",
    "deposit",
    "snapshot",
]

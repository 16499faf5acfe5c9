"""Mutable state of a single two-asset pool."""

from __future__ import annotations

from dataclasses import dataclass

from amm.errors import InvalidPair
from amm.models.types import normalize_address


@dataclass
class PoolState:
    """Reserves and claim supply for one asset pair.

    The pool engine is the only writer. token_a/token_b are fixed at
    construction; reserves and total_supply change only through engine
    operations.
    """

    address: str
    token_a: str
    token_b: str
    reserve_a: int = 0
    reserve_b: int = 0
    # Outstanding claim tokens; mirrors the ledger supply of the claim token
    total_supply: int = 0
    # Clock time of the last reserve update
    block_timestamp_last: int = 0

    def __post_init__(self) -> None:
        self.address = normalize_address(self.address)
        self.token_a = normalize_address(self.token_a)
        self.token_b = normalize_address(self.token_b)
        if self.token_a == self.token_b:
            raise InvalidPair(f"Pool needs two distinct assets, got {self.token_a} twice")
        # The claim token lives at the pool address, so it cannot double as a pair asset
        if self.address in (self.token_a, self.token_b):
            raise InvalidPair(f"Pool address {self.address} is also one of its assets")

    @property
    def k(self) -> int:
        """Current reserve product."""
        return self.reserve_a * self.reserve_b

    def matches(self, token_x: str, token_y: str) -> bool:
        """True if (token_x, token_y) is this pool's pair, in either order."""
        pair = {normalize_address(token_x), normalize_address(token_y)}
        return pair == {self.token_a, self.token_b}

    def reserve_of(self, token: str) -> int:
        token_norm = normalize_address(token)
        if token_norm == self.token_a:
            return self.reserve_a
        elif token_norm == self.token_b:
            return self.reserve_b
        else:
            raise InvalidPair(f"Token {token} not in pool")

    def orient(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        token_in_norm = normalize_address(token_in)
        if token_in_norm == self.token_a:
            return self.reserve_a, self.reserve_b
        elif token_in_norm == self.token_b:
            return self.reserve_b, self.reserve_a
        else:
            raise InvalidPair(f"Token {token_in} not in pool")

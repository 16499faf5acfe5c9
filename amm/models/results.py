"""Result types returned by pool operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AddLiquidityResult:
    """Amounts actually deposited and claim tokens minted.

    amount_a/amount_b follow the token order the caller passed in,
    not the pool's internal order.
    """

    amount_a: int
    amount_b: int
    liquidity: int


@dataclass(frozen=True)
class RemoveLiquidityResult:
    """Amounts paid out for burned claim tokens, in the caller's token order."""

    amount_a: int
    amount_b: int
    liquidity: int


@dataclass(frozen=True)
class SwapResult:
    """Result of an executed swap."""

    token_in: str
    token_out: str
    amount_in: int
    amount_out: int

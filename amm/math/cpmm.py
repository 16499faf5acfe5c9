"""Constant product (x * y = k) pool math.

All functions are pure and work on raw integer amounts. Division always
truncates, so every rounding step favours the pool over the caller.
Intermediate products are uint256-checked: an input large enough to
overflow raises Uint256Overflow instead of wrapping.

Swap formula, with the fee taken from the input side:

    amount_in_with_fee = amount_in * fee_multiplier
    amount_out = amount_in_with_fee * reserve_out
                 / (reserve_in * 10000 + amount_in_with_fee)

With fee_multiplier = 9970 (30 bps) this is exactly the familiar
997/1000 formula; with 10000 (0 bps) it reduces to the fee-less
amount_in * reserve_out / (reserve_in + amount_in).
"""

from __future__ import annotations

from amm.constants import BPS_DENOMINATOR, PRICE_SCALE
from amm.errors import (
    InsufficientLiquidity,
    InsufficientLiquidityMinted,
    InvalidAmount,
    SlippageExceeded,
)
from amm.math.integer import isqrt
from amm.safe_int import S

DEFAULT_FEE_MULTIPLIER = BPS_DENOMINATOR - 30


def quote(amount_a: int, reserve_a: int, reserve_b: int) -> int:
    """Amount of B worth amount_a of A at the current reserve ratio.

    Raises:
        InvalidAmount: If amount_a is zero
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_a <= 0:
        raise InvalidAmount("quote amount must be positive")
    if reserve_a <= 0 or reserve_b <= 0:
        raise InsufficientLiquidity("pool has no reserves to quote against")
    return (S(amount_a) * S(reserve_b) // S(reserve_a)).value


def get_amount_out(
    amount_in: int,
    reserve_in: int,
    reserve_out: int,
    fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
) -> int:
    """Calculate output amount for an exact input.

    Args:
        amount_in: Input token amount
        reserve_in: Reserve of input token in pool
        reserve_out: Reserve of output token in pool
        fee_multiplier: 10000 - fee_bps (default 9970 for 0.3%)

    Returns:
        Output token amount, rounded down

    Raises:
        InvalidAmount: If amount_in is not positive
        InsufficientLiquidity: If either reserve is zero
    """
    if amount_in <= 0:
        raise InvalidAmount("amount_in must be positive")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity("pool has no reserves to swap against")

    amount_in_with_fee = S(amount_in) * S(fee_multiplier)
    numerator = amount_in_with_fee * S(reserve_out)
    denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

    return (numerator // denominator).value


def get_amount_in(
    amount_out: int,
    reserve_in: int,
    reserve_out: int,
    fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
) -> int:
    """Calculate the input required for an exact output.

    Formula: amount_in = (res_in * out * 10000) / ((res_out - out) * fee) + 1

    The trailing +1 rounds up, so the returned input always buys at least
    amount_out.

    Raises:
        InvalidAmount: If amount_out is not positive
        InsufficientLiquidity: If a reserve is zero or amount_out would
            drain the output reserve
    """
    if amount_out <= 0:
        raise InvalidAmount("amount_out must be positive")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InsufficientLiquidity("pool has no reserves to swap against")
    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"amount_out {amount_out} exceeds available reserve {reserve_out}"
        )

    numerator = S(reserve_in) * S(amount_out) * S(BPS_DENOMINATOR)
    denominator = (S(reserve_out) - S(amount_out)) * S(fee_multiplier)

    return ((numerator // denominator) + S(1)).value


def optimal_amounts(
    amount_a_desired: int,
    amount_b_desired: int,
    amount_a_min: int,
    amount_b_min: int,
    reserve_a: int,
    reserve_b: int,
) -> tuple[int, int]:
    """Pick deposit amounts that preserve the reserve ratio.

    An empty pool takes the desired amounts as they are. Otherwise the
    caller's A is matched with as much B as the ratio asks for; if that is
    more B than offered, the caller's B is matched with A instead. Neither
    returned amount exceeds what the caller offered.

    Raises:
        SlippageExceeded: If the matched amount is below its minimum
    """
    if reserve_a == 0 and reserve_b == 0:
        return amount_a_desired, amount_b_desired

    amount_b_optimal = quote(amount_a_desired, reserve_a, reserve_b)
    if amount_b_optimal <= amount_b_desired:
        if amount_b_optimal < amount_b_min:
            raise SlippageExceeded(f"amount_b {amount_b_optimal} below minimum {amount_b_min}")
        return amount_a_desired, amount_b_optimal

    amount_a_optimal = quote(amount_b_desired, reserve_b, reserve_a)
    if amount_a_optimal > amount_a_desired:
        raise SlippageExceeded(
            f"amount_a {amount_a_optimal} exceeds desired {amount_a_desired}"
        )
    if amount_a_optimal < amount_a_min:
        raise SlippageExceeded(f"amount_a {amount_a_optimal} below minimum {amount_a_min}")
    return amount_a_optimal, amount_b_desired


def liquidity_to_mint(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_supply: int,
) -> int:
    """Claim tokens owed for a deposit.

    The first deposit mints sqrt(amount_a * amount_b). Later deposits mint
    the smaller of the two proportional shares, so a deposit slightly off
    the pool ratio never earns more than its weaker side.

    Raises:
        InsufficientLiquidityMinted: If the result is zero
    """
    if total_supply == 0:
        liquidity = isqrt((S(amount_a) * S(amount_b)).value)
    else:
        if reserve_a <= 0 or reserve_b <= 0:
            raise InsufficientLiquidity("pool has supply but no reserves")
        share_a = S(amount_a) * S(total_supply) // S(reserve_a)
        share_b = S(amount_b) * S(total_supply) // S(reserve_b)
        liquidity = share_a.min(share_b).value

    if liquidity == 0:
        raise InsufficientLiquidityMinted("deposit too small to mint claim tokens")
    return liquidity


def liquidity_to_amounts(
    liquidity: int,
    balance_a: int,
    balance_b: int,
    total_supply: int,
) -> tuple[int, int]:
    """Pro-rata share of both balances for burning liquidity claim tokens.

    Raises:
        InsufficientLiquidity: If total_supply is zero
    """
    if total_supply <= 0:
        raise InsufficientLiquidity("pool has no outstanding claim tokens")
    amount_a = S(liquidity) * S(balance_a) // S(total_supply)
    amount_b = S(liquidity) * S(balance_b) // S(total_supply)
    return amount_a.value, amount_b.value


def spot_price(reserve_self: int, reserve_other: int, scale: int = PRICE_SCALE) -> int:
    """Price of one unit of the self asset in units of the other, scaled.

    Raises:
        InsufficientLiquidity: If reserve_self is zero
    """
    if reserve_self <= 0:
        raise InsufficientLiquidity("cannot price an asset with zero reserve")
    return (S(reserve_other) * S(scale) // S(reserve_self)).value


def product_not_decreased(
    reserve_in: int,
    reserve_out: int,
    new_reserve_in: int,
    new_reserve_out: int,
    amount_in: int,
    fee_multiplier: int = DEFAULT_FEE_MULTIPLIER,
) -> bool:
    """Check the fee-adjusted constant product held across a swap.

    Compares (in' * 10000 - amount_in * fee_bps) * out' * 10000 against
    in * out * 10000^2, i.e. the product after discounting the fee must be
    at least the product before.
    """
    # Products of two reserves may legitimately exceed uint256 here; they
    # are only compared, never stored.
    fee_bps = BPS_DENOMINATOR - fee_multiplier
    adjusted_in = new_reserve_in * BPS_DENOMINATOR - amount_in * fee_bps
    adjusted_out = new_reserve_out * BPS_DENOMINATOR
    return adjusted_in * adjusted_out >= reserve_in * reserve_out * BPS_DENOMINATOR**2

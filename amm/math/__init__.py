"""Integer math for the constant product pool."""

from amm.math.cpmm import (
    DEFAULT_FEE_MULTIPLIER,
    get_amount_in,
    get_amount_out,
    liquidity_to_amounts,
    liquidity_to_mint,
    optimal_amounts,
    product_not_decreased,
    quote,
    spot_price,
)
from amm.math.integer import isqrt

__all__ = [
    "DEFAULT_FEE_MULTIPLIER",
    "get_amount_in",
    "get_amount_out",
    "isqrt",
    "liquidity_to_amounts",
    "liquidity_to_mint",
    "optimal_amounts",
    "product_not_decreased",
    "quote",
    "spot_price",
]

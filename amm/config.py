"""Pool configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from amm.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS, PRICE_SCALE


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for a pool engine.

    One fee rate drives both quoting and swap execution, so the two can
    never disagree about pricing.

    Attributes:
        fee_bps: Swap fee in basis points, taken from the input side
            (default: 30 = 0.3%). 0 selects the fee-less constant product.
        price_scale: Fixed-point scale for spot prices (default: 1e18)
        minimum_liquidity: Claim tokens permanently locked on the first
            deposit (default: 0 = no lock)
    """

    fee_bps: int = DEFAULT_FEE_BPS
    price_scale: int = PRICE_SCALE
    minimum_liquidity: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.fee_bps < BPS_DENOMINATOR:
            raise ValueError(f"fee_bps must be in [0, {BPS_DENOMINATOR}): {self.fee_bps}")
        if self.price_scale <= 0:
            raise ValueError(f"price_scale must be positive: {self.price_scale}")
        if self.minimum_liquidity < 0:
            raise ValueError(f"minimum_liquidity cannot be negative: {self.minimum_liquidity}")

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for swap math (10000 - fee_bps).

        For 30 bps (0.3%), this returns 9970.
        Used in: amount_in_with_fee = amount_in * fee_multiplier / 10000
        """
        return BPS_DENOMINATOR - self.fee_bps

    @classmethod
    def from_env(cls) -> PoolConfig:
        """Build a config from environment variables.

        - AMM_FEE_BPS: Swap fee in basis points (default: 30)
        - AMM_PRICE_SCALE: Spot price scale (default: 10**18)
        - AMM_MINIMUM_LIQUIDITY: Claim tokens locked at bootstrap (default: 0)
        """
        return cls(
            fee_bps=int(os.environ.get("AMM_FEE_BPS", str(DEFAULT_FEE_BPS))),
            price_scale=int(os.environ.get("AMM_PRICE_SCALE", str(PRICE_SCALE))),
            minimum_liquidity=int(os.environ.get("AMM_MINIMUM_LIQUIDITY", "0")),
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()

"""Protocol constants for the pool engine.

Centralizes numeric limits and default pool parameters.
"""

# Largest value a reserve, supply or transfer amount may take
UINT256_MAX = 2**256 - 1

# Fixed-point scale for spot prices (1e18)
PRICE_SCALE = 10**18

# Fees are expressed in basis points of this denominator
BPS_DENOMINATOR = 10_000

# 0.3% swap fee, the classic constant-product default
DEFAULT_FEE_BPS = 30

# Holder of permanently locked claim tokens (see PoolConfig.minimum_liquidity)
DEAD_ADDRESS = "0x000000000000000000000000000000000000dead"

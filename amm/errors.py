"""Pool error classes.

Every rejection raised by the pool engine derives from PoolError. Each one
is an ordinary outcome the caller is expected to handle; none is retried.
"""


class PoolError(Exception):
    """Base error for pool operations."""

    pass


class Expired(PoolError):
    """Current time is past the caller-supplied deadline."""

    pass


class InvalidPair(PoolError):
    """Supplied assets or swap path do not match the pool's pair."""

    pass


class InvalidAddress(PoolError, ValueError):
    """A caller or recipient is not a 0x-prefixed 20-byte hex address."""

    pass


class InvalidAmount(PoolError):
    """Amount or minimum argument is zero, negative, or inconsistent."""

    pass


class SlippageExceeded(PoolError):
    """Computed amount violates a caller-supplied bound."""

    pass


class InsufficientOutputAmount(SlippageExceeded):
    """Swap output rounds down to zero."""

    pass


class ExcessiveInputAmount(SlippageExceeded):
    """Exact-output swap requires more input than the caller allowed."""

    pass


class InsufficientLiquidity(PoolError):
    """A reserve needed as a ratio denominator is zero, or is too small."""

    pass


class InsufficientLiquidityMinted(PoolError):
    """Deposit would mint zero claim tokens."""

    pass


class InsufficientLiquidityBurned(PoolError):
    """Withdrawal would pay out zero of one of the assets."""

    pass


class InsufficientBalance(PoolError):
    """Caller lacks the claim-token or asset balance/allowance required."""

    pass


class TransferFailed(PoolError):
    """The ledger reported a failed transfer."""

    pass


class InvariantViolation(PoolError):
    """Fee-adjusted reserve product decreased across a swap."""

    pass


class Locked(PoolError):
    """A pool operation was re-entered while another was in progress."""

    pass

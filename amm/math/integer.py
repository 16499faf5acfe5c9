"""Integer helpers for pool math."""


def isqrt(y: int) -> int:
    """Floor of the square root of y, by Babylonian iteration.

    The result z satisfies z*z <= y < (z+1)*(z+1). It seeds the first
    claim-token mint, so it must be exact rather than approximate.

    Raises:
        ValueError: If y is negative
    """
    if y < 0:
        raise ValueError(f"isqrt of negative number: {y}")
    if y > 3:
        z = y
        x = y // 2 + 1
        while x < z:
            z = x
            x = (y // x + x) // 2
        return z
    if y != 0:
        return 1
    return 0

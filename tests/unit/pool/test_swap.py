"""Tests for swaps and swap quotes."""

import pytest

from amm.config import PoolConfig
from amm.errors import (
    ExcessiveInputAmount,
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientOutputAmount,
    InvalidAddress,
    InvalidAmount,
    InvalidPair,
    SlippageExceeded,
)
from amm.pool import LiquidityPool
from tests.helpers import (
    ALICE,
    BOB,
    CAROL,
    DEADLINE,
    POOL,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    deposit,
    fund,
)


def swap(pool: LiquidityPool, amount_in: int, path=(TOKEN_A, TOKEN_B), **overrides):
    """Fund BOB with the input and swap it with no slippage bound."""
    fund(pool.ledger, BOB, *((amount_in, 0) if path[0] == TOKEN_A else (0, amount_in)))
    kwargs = {
        "caller": BOB,
        "amount_in": amount_in,
        "amount_out_min": 0,
        "path": list(path),
        "to": BOB,
        "deadline": DEADLINE,
    }
    kwargs.update(overrides)
    return pool.swap_exact_tokens_for_tokens(**kwargs)


class TestExactInputSwap:
    """Tests for swap_exact_tokens_for_tokens."""

    def test_a_for_b(self, seeded_pool):
        """100 A into (1000, 4000) yields 100*997*4000 / (1000*1000 + 100*997) = 362 B."""
        result = swap(seeded_pool, 100)

        assert result.amount_in == 100
        assert result.amount_out == 362
        assert (result.token_in, result.token_out) == (TOKEN_A, TOKEN_B)
        assert seeded_pool.get_reserves()[:2] == (1100, 3638)
        assert seeded_pool.ledger.token(TOKEN_B).balance_of(BOB) == 362
        assert seeded_pool.ledger.token(TOKEN_A).balance_of(BOB) == 0

    def test_b_for_a(self, seeded_pool):
        result = swap(seeded_pool, 400, path=(TOKEN_B, TOKEN_A))
        assert result.amount_out == 90
        assert seeded_pool.get_reserves()[:2] == (910, 4400)

    def test_quote_matches_execution(self, seeded_pool):
        quoted = seeded_pool.get_amount_out(250, TOKEN_A, TOKEN_B)
        assert swap(seeded_pool, 250).amount_out == quoted

    def test_reserves_track_ledger(self, seeded_pool):
        swap(seeded_pool, 100)
        swap(seeded_pool, 50, path=(TOKEN_B, TOKEN_A))
        reserve_a, reserve_b, _ = seeded_pool.get_reserves()
        assert reserve_a == seeded_pool.ledger.token(TOKEN_A).balance_of(POOL)
        assert reserve_b == seeded_pool.ledger.token(TOKEN_B).balance_of(POOL)

    def test_pays_recipient(self, seeded_pool):
        swap(seeded_pool, 100, to=CAROL)
        assert seeded_pool.ledger.token(TOKEN_B).balance_of(CAROL) == 362
        assert seeded_pool.ledger.token(TOKEN_B).balance_of(BOB) == 0

    def test_fee_grows_claim_value(self, seeded_pool):
        """Round-trip swaps leave more per claim token than they started with."""
        swap(seeded_pool, 100)
        swap(seeded_pool, 362, path=(TOKEN_B, TOKEN_A))
        reserve_a, reserve_b, _ = seeded_pool.get_reserves()
        assert reserve_a * reserve_b > 1000 * 4000
        assert seeded_pool.total_supply == 2000


class TestProductMonotonicity:
    """The reserve product strictly grows across every fee-bearing swap."""

    @pytest.mark.parametrize("amount_in", [1, 3, 10, 99, 100, 997, 5000, 10**6])
    @pytest.mark.parametrize("path", [(TOKEN_A, TOKEN_B), (TOKEN_B, TOKEN_A)])
    def test_product_strictly_increases(self, pool, amount_in, path):
        deposit(pool, ALICE, 1000, 4000)
        before = pool.state.k
        try:
            swap(pool, amount_in, path=path)
        except InsufficientOutputAmount:
            # Dust input: nothing happened, product unchanged
            assert pool.state.k == before
            return
        assert pool.state.k > before

    def test_sequence_of_swaps(self, seeded_pool):
        product = seeded_pool.state.k
        for amount_in, path in [
            (100, (TOKEN_A, TOKEN_B)),
            (700, (TOKEN_B, TOKEN_A)),
            (5, (TOKEN_A, TOKEN_B)),
            (1234, (TOKEN_B, TOKEN_A)),
        ]:
            swap(seeded_pool, amount_in, path=path)
            assert seeded_pool.state.k > product
            product = seeded_pool.state.k


class TestSwapRejections:
    """Tests for swap preconditions."""

    def test_slippage(self, seeded_pool):
        with pytest.raises(SlippageExceeded):
            swap(seeded_pool, 100, amount_out_min=363)
        assert seeded_pool.get_reserves()[:2] == (1000, 4000)

    def test_exact_minimum_passes(self, seeded_pool):
        assert swap(seeded_pool, 100, amount_out_min=362).amount_out == 362

    def test_dust_output(self, seeded_pool):
        """1 B buys less than one unit of A."""
        with pytest.raises(InsufficientOutputAmount):
            swap(seeded_pool, 1, path=(TOKEN_B, TOKEN_A))

    def test_empty_pool(self, pool):
        with pytest.raises(InsufficientLiquidity):
            swap(pool, 100)

    @pytest.mark.parametrize(
        "path",
        [
            [TOKEN_A],
            [TOKEN_A, TOKEN_A],
            [TOKEN_A, TOKEN_C],
            [TOKEN_C, TOKEN_B],
            [TOKEN_A, TOKEN_B, TOKEN_A],
        ],
    )
    def test_invalid_path(self, seeded_pool, path):
        fund(seeded_pool.ledger, BOB, 100, 0)
        with pytest.raises(InvalidPair):
            seeded_pool.swap_exact_tokens_for_tokens(BOB, 100, 0, path, BOB, DEADLINE)

    @pytest.mark.parametrize("amount_in", [0, -1, False, 2**256])
    def test_invalid_amount_in(self, seeded_pool, amount_in):
        with pytest.raises(InvalidAmount):
            seeded_pool.swap_exact_tokens_for_tokens(
                BOB, amount_in, 0, [TOKEN_A, TOKEN_B], BOB, DEADLINE
            )

    def test_negative_minimum(self, seeded_pool):
        with pytest.raises(InvalidAmount):
            swap(seeded_pool, 100, amount_out_min=-1)

    def test_unfunded_caller(self, seeded_pool):
        with pytest.raises(InsufficientBalance):
            seeded_pool.swap_exact_tokens_for_tokens(
                CAROL, 100, 0, [TOKEN_A, TOKEN_B], CAROL, DEADLINE
            )

    def test_pool_as_recipient(self, seeded_pool):
        """Output paid back to the pool would desync reserves from balances."""
        with pytest.raises(InvalidAddress):
            swap(seeded_pool, 100, to=POOL.upper().replace("0X", "0x"))

        fund(seeded_pool.ledger, BOB, 100, 0)
        with pytest.raises(InvalidAddress):
            seeded_pool.swap_tokens_for_exact_tokens(
                BOB, 362, 100, [TOKEN_A, TOKEN_B], POOL, DEADLINE
            )

        reserve_a, reserve_b, _ = seeded_pool.get_reserves()
        assert (reserve_a, reserve_b) == (1000, 4000)
        assert reserve_a == seeded_pool.ledger.token(TOKEN_A).balance_of(POOL)
        assert reserve_b == seeded_pool.ledger.token(TOKEN_B).balance_of(POOL)


class TestExactOutputSwap:
    """Tests for swap_tokens_for_exact_tokens."""

    def test_buys_exact_output(self, seeded_pool):
        assert seeded_pool.get_amount_in(362, TOKEN_A, TOKEN_B) == 100
        fund(seeded_pool.ledger, BOB, 100, 0)

        result = seeded_pool.swap_tokens_for_exact_tokens(
            BOB, 362, 100, [TOKEN_A, TOKEN_B], BOB, DEADLINE
        )

        assert (result.amount_in, result.amount_out) == (100, 362)
        assert seeded_pool.get_reserves()[:2] == (1100, 3638)

    def test_input_above_maximum(self, seeded_pool):
        fund(seeded_pool.ledger, BOB, 100, 0)
        with pytest.raises(ExcessiveInputAmount):
            seeded_pool.swap_tokens_for_exact_tokens(
                BOB, 362, 99, [TOKEN_A, TOKEN_B], BOB, DEADLINE
            )

    def test_excessive_input_is_slippage(self):
        assert issubclass(ExcessiveInputAmount, SlippageExceeded)

    def test_cannot_drain_reserve(self, seeded_pool):
        fund(seeded_pool.ledger, BOB, 10**9, 0)
        with pytest.raises(InsufficientLiquidity):
            seeded_pool.swap_tokens_for_exact_tokens(
                BOB, 4000, 10**9, [TOKEN_A, TOKEN_B], BOB, DEADLINE
            )


class TestFeeConfiguration:
    """One fee rate drives quotes and swaps alike."""

    @pytest.fixture
    def config(self) -> PoolConfig:
        return PoolConfig(fee_bps=0)

    def test_feeless_swap(self, seeded_pool):
        """With no fee, amount_out = amount_in * reserve_out / (reserve_in + amount_in)."""
        assert seeded_pool.get_amount_out(100, TOKEN_A, TOKEN_B) == 100 * 4000 // 1100
        assert swap(seeded_pool, 100).amount_out == 363

    def test_feeless_product_never_decreases(self, seeded_pool):
        swap(seeded_pool, 100)
        assert seeded_pool.state.k >= 1000 * 4000


class TestQuotes:
    """Tests for read-only quote helpers."""

    def test_quote_ratio(self, seeded_pool):
        assert seeded_pool.quote(100, TOKEN_A, TOKEN_B) == 400
        assert seeded_pool.quote(400, TOKEN_B, TOKEN_A) == 100

    def test_quote_does_not_mutate(self, seeded_pool):
        seeded_pool.get_amount_out(100, TOKEN_A, TOKEN_B)
        seeded_pool.get_amount_in(100, TOKEN_A, TOKEN_B)
        assert seeded_pool.get_reserves()[:2] == (1000, 4000)
        assert seeded_pool.events[-1].kind == "liquidity_added"

    def test_quote_foreign_token(self, seeded_pool):
        with pytest.raises(InvalidPair):
            seeded_pool.get_amount_out(100, TOKEN_A, TOKEN_C)

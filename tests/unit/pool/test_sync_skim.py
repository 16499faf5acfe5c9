"""Tests for reconciling reserves with ledger balances."""

import pytest

from amm.errors import InvalidAddress
from amm.models import Synced
from tests.helpers import ALICE, BOB, DEADLINE, NOW, POOL, TOKEN_A, TOKEN_B, fund


@pytest.fixture
def donated_pool(seeded_pool):
    """Seeded pool holding 500 A more than its recorded reserve."""
    fund(seeded_pool.ledger, ALICE, 500, 0)
    seeded_pool.ledger.token(TOKEN_A).transfer(ALICE, POOL, 500)
    return seeded_pool


class TestSkim:
    def test_sends_excess(self, donated_pool):
        assert donated_pool.skim(BOB) == (500, 0)
        assert donated_pool.ledger.token(TOKEN_A).balance_of(BOB) == 500
        assert donated_pool.ledger.token(TOKEN_A).balance_of(POOL) == 1000
        assert donated_pool.get_reserves()[:2] == (1000, 4000)

    def test_nothing_to_skim(self, seeded_pool):
        assert seeded_pool.skim(BOB) == (0, 0)
        assert seeded_pool.ledger.token(TOKEN_A).balance_of(BOB) == 0

    def test_emits_no_event(self, donated_pool):
        events = len(donated_pool.events)
        donated_pool.skim(BOB)
        assert len(donated_pool.events) == events

    def test_invalid_recipient(self, donated_pool):
        with pytest.raises(InvalidAddress):
            donated_pool.skim("0x1234")
        assert donated_pool.ledger.token(TOKEN_A).balance_of(POOL) == 1500


class TestSync:
    def test_adopts_balances(self, donated_pool, clock):
        clock.advance(30)
        assert donated_pool.sync() == (1500, 4000)
        assert donated_pool.get_reserves() == (1500, 4000, NOW + 30)

    def test_emits_synced(self, donated_pool):
        donated_pool.sync()
        event = donated_pool.events[-1]
        assert isinstance(event, Synced)
        assert (event.reserve_a, event.reserve_b) == (1500, 4000)

    def test_donation_moves_price_after_sync(self, donated_pool):
        fund(donated_pool.ledger, BOB, 100, 0)
        before = donated_pool.get_amount_out(100, TOKEN_A, TOKEN_B)
        donated_pool.sync()
        after = donated_pool.get_amount_out(100, TOKEN_A, TOKEN_B)
        assert after < before

        result = donated_pool.swap_exact_tokens_for_tokens(
            BOB, 100, 0, [TOKEN_A, TOKEN_B], BOB, DEADLINE
        )
        assert result.amount_out == after

"""In-memory ledger implementation.

Keeps balances, allowances and supply for any number of asset kinds in
plain dictionaries. Transactions snapshot the whole ledger and restore it
when the managed block raises, which gives pool operations the same
revert-on-failure semantics a host chain would.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

from amm.constants import UINT256_MAX
from amm.models.types import normalize_address
from amm.safe_int import S

logger = structlog.get_logger()

# Called after every successful transfer: (token, sender, to, amount)
TransferHook = Callable[[str, str, str, int], None]


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"Amount must be int, got {type(amount).__name__}")
    if not 0 <= amount <= UINT256_MAX:
        raise ValueError(f"Amount out of uint256 range: {amount}")


class InMemoryToken:
    """Token handle backed by an InMemoryLedger."""

    def __init__(self, ledger: InMemoryLedger, address: str) -> None:
        self._ledger = ledger
        self.address = address

    def __repr__(self) -> str:
        return f"InMemoryToken({self.address})"

    @property
    def _balances(self) -> dict[str, int]:
        return self._ledger._balances.setdefault(self.address, {})

    @property
    def _allowances(self) -> dict[tuple[str, str], int]:
        return self._ledger._allowances.setdefault(self.address, {})

    def balance_of(self, holder: str) -> int:
        return self._balances.get(normalize_address(holder), 0)

    def total_supply(self) -> int:
        return self._ledger._supply.get(self.address, 0)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((normalize_address(owner), normalize_address(spender)), 0)

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        _check_amount(amount)
        self._allowances[(normalize_address(owner), normalize_address(spender))] = amount
        return True

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        _check_amount(amount)
        sender, to = normalize_address(sender), normalize_address(to)
        if not self._move(sender, to, amount):
            return False
        self._ledger._notify(self.address, sender, to, amount)
        return True

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        _check_amount(amount)
        spender, owner, to = (normalize_address(a) for a in (spender, owner, to))
        allowed = self._allowances.get((owner, spender), 0)
        if allowed < amount:
            return False
        if not self._move(owner, to, amount):
            return False
        # Max allowance is treated as infinite
        if allowed != UINT256_MAX:
            self._allowances[(owner, spender)] = allowed - amount
        self._ledger._notify(self.address, owner, to, amount)
        return True

    def mint(self, to: str, amount: int) -> None:
        _check_amount(amount)
        to = normalize_address(to)
        supply = S(self.total_supply()) + amount
        self._balances[to] = self.balance_of(to) + amount
        self._ledger._supply[self.address] = supply.value

    def burn(self, owner: str, amount: int) -> None:
        _check_amount(amount)
        owner = normalize_address(owner)
        balance = S(self.balance_of(owner)) - amount
        self._balances[owner] = balance.value
        self._ledger._supply[self.address] = (S(self.total_supply()) - amount).value

    def _move(self, sender: str, to: str, amount: int) -> bool:
        balance = self._balances.get(sender, 0)
        if balance < amount:
            return False
        self._balances[sender] = balance - amount
        self._balances[to] = self._balances.get(to, 0) + amount
        return True


class InMemoryLedger:
    """Ledger of any number of asset kinds held in memory.

    Usage:
        ledger = InMemoryLedger()
        usdc = ledger.token("0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48")
        usdc.mint(alice, 1_000)

        with ledger.transaction():
            usdc.transfer(alice, bob, 400)
            raise RuntimeError  # alice's 400 are restored

    Args:
        on_transfer: Optional hook run after every successful transfer
    """

    def __init__(self, on_transfer: TransferHook | None = None) -> None:
        self._balances: dict[str, dict[str, int]] = {}
        self._allowances: dict[str, dict[tuple[str, str], int]] = {}
        self._supply: dict[str, int] = {}
        self._tokens: dict[str, InMemoryToken] = {}
        self.on_transfer = on_transfer

    def token(self, address: str) -> InMemoryToken:
        address = normalize_address(address)
        handle = self._tokens.get(address)
        if handle is None:
            handle = InMemoryToken(self, address)
            self._tokens[address] = handle
        return handle

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = self._snapshot()
        try:
            yield
        except BaseException:
            self._restore(snapshot)
            logger.debug("ledger_rolled_back")
            raise

    def _snapshot(
        self,
    ) -> tuple[dict[str, dict[str, int]], dict[str, dict[tuple[str, str], int]], dict[str, int]]:
        return (
            {token: dict(held) for token, held in self._balances.items()},
            {token: dict(allowed) for token, allowed in self._allowances.items()},
            dict(self._supply),
        )

    def _restore(
        self,
        snapshot: tuple[
            dict[str, dict[str, int]], dict[str, dict[tuple[str, str], int]], dict[str, int]
        ],
    ) -> None:
        self._balances, self._allowances, self._supply = snapshot

    def _notify(self, token: str, sender: str, to: str, amount: int) -> None:
        if self.on_transfer is not None:
            self.on_transfer(token, sender, to, amount)

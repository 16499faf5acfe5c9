"""Interfaces for the fungible asset ledger the pool engine runs on.

The ledger is an external collaborator: it owns balances, allowances and
supply for every asset kind, including the pool's own claim token. The
engine only calls it through these protocols.
"""

from contextlib import AbstractContextManager
from typing import Protocol, runtime_checkable


@runtime_checkable
class Token(Protocol):
    """ERC20-like handle for one asset kind.

    There is no implicit message sender: every state-changing method names
    the account acting. Transfers report failure by returning False rather
    than raising.
    """

    address: str

    def balance_of(self, holder: str) -> int:
        """Balance held by holder."""
        ...

    def total_supply(self) -> int:
        """Total outstanding units of this asset."""
        ...

    def allowance(self, owner: str, spender: str) -> int:
        """Amount spender may still pull from owner."""
        ...

    def approve(self, owner: str, spender: str, amount: int) -> bool:
        """Set spender's allowance over owner's balance."""
        ...

    def transfer(self, sender: str, to: str, amount: int) -> bool:
        """Move amount from sender to to.

        Returns:
            False if sender's balance is insufficient
        """
        ...

    def transfer_from(self, spender: str, owner: str, to: str, amount: int) -> bool:
        """Move amount from owner to to, consuming spender's allowance.

        Returns:
            False if owner's balance or spender's allowance is insufficient
        """
        ...

    def mint(self, to: str, amount: int) -> None:
        """Create amount new units held by to."""
        ...

    def burn(self, owner: str, amount: int) -> None:
        """Destroy amount units held by owner."""
        ...


@runtime_checkable
class Ledger(Protocol):
    """Multi-asset ledger with all-or-nothing transactions."""

    def token(self, address: str) -> Token:
        """Get the handle for the asset at address."""
        ...

    def transaction(self) -> AbstractContextManager[None]:
        """Open a transaction.

        If the managed block raises, every balance, allowance and supply
        change made inside it is undone before the exception propagates.
        """
        ...

"""Fungible asset ledger interfaces and the in-memory implementation."""

from amm.ledger.base import Ledger, Token
from amm.ledger.memory import InMemoryLedger, InMemoryToken, TransferHook

__all__ = [
    "Ledger",
    "Token",
    "InMemoryLedger",
    "InMemoryToken",
    "TransferHook",
]

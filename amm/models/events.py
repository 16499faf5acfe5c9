"""Pydantic models for events emitted by the pool engine.

One event is emitted per successful state-changing operation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from amm.models.types import Address, Amount


class PoolEvent(BaseModel):
    """Base for pool events."""

    model_config = ConfigDict(frozen=True)

    pool: Address = Field(description="Address of the emitting pool")
    timestamp: int = Field(ge=0, description="Clock time the operation ran at")


class LiquidityAdded(PoolEvent):
    """A deposit minted claim tokens."""

    kind: Literal["liquidity_added"] = "liquidity_added"
    user: Address
    token_a: Address
    token_b: Address
    amount_a: Amount
    amount_b: Amount
    liquidity: Amount = Field(description="Claim tokens minted")


class LiquidityRemoved(PoolEvent):
    """A withdrawal burned claim tokens."""

    kind: Literal["liquidity_removed"] = "liquidity_removed"
    user: Address
    token_a: Address
    token_b: Address
    amount_a: Amount
    amount_b: Amount
    liquidity: Amount = Field(description="Claim tokens burned")


class Swapped(PoolEvent):
    """A swap moved one asset in and the other out."""

    kind: Literal["swapped"] = "swapped"
    user: Address
    token_in: Address
    token_out: Address
    amount_in: Amount
    amount_out: Amount


class Synced(PoolEvent):
    """Reserves were reconciled against ledger balances."""

    kind: Literal["synced"] = "synced"
    reserve_a: Amount
    reserve_b: Amount

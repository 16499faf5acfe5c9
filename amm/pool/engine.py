"""Constant product liquidity pool engine.

LiquidityPool owns the state of one asset pair and implements deposits,
withdrawals, swaps and price queries on top of a fungible asset ledger.

Every mutating operation:
1. Runs under the pool's entry guard (serialized, no re-entry)
2. Checks all preconditions before touching the ledger
3. Moves assets inside a ledger transaction, so any failure restores
   balances and pool state together
4. Emits one event after it has committed
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace

import structlog

from amm.clock import Clock, SystemClock
from amm.config import DEFAULT_POOL_CONFIG, PoolConfig
from amm.constants import DEAD_ADDRESS
from amm.errors import (
    ExcessiveInputAmount,
    Expired,
    InsufficientBalance,
    InsufficientLiquidity,
    InsufficientLiquidityBurned,
    InsufficientLiquidityMinted,
    InsufficientOutputAmount,
    InvalidAddress,
    InvalidAmount,
    InvalidPair,
    InvariantViolation,
    PoolError,
    SlippageExceeded,
    TransferFailed,
)
from amm.ledger.base import Ledger, Token
from amm.math import (
    get_amount_in,
    get_amount_out,
    liquidity_to_amounts,
    liquidity_to_mint,
    optimal_amounts,
    product_not_decreased,
    quote,
    spot_price,
)
from amm.models.events import LiquidityAdded, LiquidityRemoved, PoolEvent, Swapped, Synced
from amm.models.results import AddLiquidityResult, RemoveLiquidityResult, SwapResult
from amm.models.types import is_valid_address, normalize_address
from amm.pool.guard import EntryGuard
from amm.pool.state import PoolState
from amm.safe_int import S, SafeIntError, is_uint256

logger = structlog.get_logger()

EventCallback = Callable[[PoolEvent], None]


class LiquidityPool:
    """A single-pair constant product pool.

    The pool's claim token lives in the ledger at the pool's own address:
    claim balances are ledger balances of that token, and
    state.total_supply mirrors its ledger supply.

    Args:
        address: Address of the pool (also its claim token)
        token_a: First asset of the pair
        token_b: Second asset of the pair
        ledger: Ledger holding all three assets
        clock: Timestamp source for deadlines (default: wall clock)
        config: Fee and scaling parameters (default: DEFAULT_POOL_CONFIG)
    """

    def __init__(
        self,
        address: str,
        token_a: str,
        token_b: str,
        ledger: Ledger,
        clock: Clock | None = None,
        config: PoolConfig | None = None,
    ) -> None:
        for name, value in (("pool", address), ("token_a", token_a), ("token_b", token_b)):
            self._check_address(name, value)

        self.state = PoolState(address=address, token_a=token_a, token_b=token_b)
        self.ledger = ledger
        self.clock: Clock = clock or SystemClock()
        self.config = config or DEFAULT_POOL_CONFIG
        self.events: list[PoolEvent] = []
        self._subscribers: list[EventCallback] = []
        self._guard = EntryGuard()

    def __repr__(self) -> str:
        return (
            f"LiquidityPool({self.state.address}, {self.state.token_a}/{self.state.token_b}, "
            f"reserves=({self.state.reserve_a}, {self.state.reserve_b}))"
        )

    # --- Accessors ---

    @property
    def address(self) -> str:
        return self.state.address

    @property
    def token_a(self) -> str:
        return self.state.token_a

    @property
    def token_b(self) -> str:
        return self.state.token_b

    @property
    def claim_token(self) -> Token:
        """Ledger handle of this pool's claim token."""
        return self.ledger.token(self.state.address)

    @property
    def total_supply(self) -> int:
        return self.state.total_supply

    def claim_balance_of(self, holder: str) -> int:
        return self.claim_token.balance_of(holder)

    def get_reserves(self) -> tuple[int, int, int]:
        """Get (reserve_a, reserve_b, block_timestamp_last)."""
        with self._guard.reading():
            return self.state.reserve_a, self.state.reserve_b, self.state.block_timestamp_last

    def reserve_of(self, token: str) -> int:
        with self._guard.reading():
            return self.state.reserve_of(token)

    def subscribe(self, callback: EventCallback) -> None:
        """Register a callback run for every event this pool emits."""
        self._subscribers.append(callback)

    # --- Quotes ---

    def quote(self, amount: int, token: str, other: str) -> int:
        """Amount of other worth amount of token at the current reserve ratio."""
        with self._guard.reading():
            self._check_pair(token, other)
            return quote(amount, self.state.reserve_of(token), self.state.reserve_of(other))

    def get_amount_out(self, amount_in: int, token_in: str, token_out: str) -> int:
        """Output a swap of amount_in would currently yield."""
        with self._guard.reading():
            self._check_pair(token_in, token_out)
            self._check_amount("amount_in", amount_in, positive=True)
            reserve_in, reserve_out = self.state.orient(token_in)
            return get_amount_out(amount_in, reserve_in, reserve_out, self.config.fee_multiplier)

    def get_amount_in(self, amount_out: int, token_in: str, token_out: str) -> int:
        """Input a swap would currently need to yield amount_out."""
        with self._guard.reading():
            self._check_pair(token_in, token_out)
            self._check_amount("amount_out", amount_out, positive=True)
            reserve_in, reserve_out = self.state.orient(token_in)
            return get_amount_in(amount_out, reserve_in, reserve_out, self.config.fee_multiplier)

    def get_price(self, token: str, quote_token: str) -> int:
        """Spot price of one unit of token in units of quote_token.

        Returns:
            reserve(quote_token) * price_scale // reserve(token)

        Raises:
            InvalidPair: If the two tokens are not this pool's pair
            InsufficientLiquidity: If token's reserve is zero
        """
        with self._guard.reading():
            self._check_pair(token, quote_token)
            return spot_price(
                self.state.reserve_of(token),
                self.state.reserve_of(quote_token),
                self.config.price_scale,
            )

    # --- Liquidity ---

    def add_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        amount_a_desired: int,
        amount_b_desired: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> AddLiquidityResult:
        """Deposit both assets and mint claim tokens to `to`.

        The first deposit takes the desired amounts as they are and mints
        isqrt(amount_a * amount_b). Later deposits are trimmed to the pool's
        reserve ratio (never above what was offered) and mint the smaller
        of the two proportional shares.

        Amounts in the result follow the caller's (token_a, token_b) order.

        Raises:
            Expired, InvalidPair, InvalidAmount, InvalidAddress,
            SlippageExceeded, InsufficientLiquidityMinted,
            InsufficientBalance, TransferFailed
        """
        with self._operation("add_liquidity"):
            now = self._check_deadline(deadline)
            flipped = self._check_pair(token_a, token_b)
            caller, to = self._check_address("caller", caller), self._check_address("to", to)
            self._check_amount("amount_a_desired", amount_a_desired, positive=True)
            self._check_amount("amount_b_desired", amount_b_desired, positive=True)
            self._check_minimum("amount_a_min", amount_a_min, amount_a_desired)
            self._check_minimum("amount_b_min", amount_b_min, amount_b_desired)

            # Work in pool order from here on
            desired_a, desired_b = amount_a_desired, amount_b_desired
            min_a, min_b = amount_a_min, amount_b_min
            if flipped:
                desired_a, desired_b = desired_b, desired_a
                min_a, min_b = min_b, min_a

            state = self.state
            amount_a, amount_b = optimal_amounts(
                desired_a, desired_b, min_a, min_b, state.reserve_a, state.reserve_b
            )
            liquidity = liquidity_to_mint(
                amount_a, amount_b, state.reserve_a, state.reserve_b, state.total_supply
            )

            locked = 0
            if state.total_supply == 0 and self.config.minimum_liquidity > 0:
                locked = self.config.minimum_liquidity
                if liquidity <= locked:
                    raise InsufficientLiquidityMinted(
                        f"first deposit mints {liquidity}, must exceed locked {locked}"
                    )
                liquidity -= locked

            self._require_funds(state.token_a, caller, amount_a)
            self._require_funds(state.token_b, caller, amount_b)

            self._pull(state.token_a, caller, amount_a)
            self._pull(state.token_b, caller, amount_b)
            self._update(*self._balances(), now)

            claim = self.claim_token
            if locked:
                claim.mint(DEAD_ADDRESS, locked)
            claim.mint(to, liquidity)
            self.state.total_supply = claim.total_supply()

            if flipped:
                amount_a, amount_b = amount_b, amount_a
            event = LiquidityAdded(
                pool=state.address,
                timestamp=now,
                user=caller,
                token_a=normalize_address(token_a),
                token_b=normalize_address(token_b),
                amount_a=amount_a,
                amount_b=amount_b,
                liquidity=liquidity,
            )
            logger.info(
                "liquidity_added",
                pool=state.address,
                user=caller,
                to=to,
                amount_a=amount_a,
                amount_b=amount_b,
                liquidity=liquidity,
                locked=locked,
            )

        self._emit(event)
        return AddLiquidityResult(amount_a=amount_a, amount_b=amount_b, liquidity=liquidity)

    def remove_liquidity(
        self,
        caller: str,
        token_a: str,
        token_b: str,
        liquidity: int,
        amount_a_min: int,
        amount_b_min: int,
        to: str,
        deadline: int,
    ) -> RemoveLiquidityResult:
        """Burn caller's claim tokens and pay out the pro-rata share to `to`.

        Payouts are computed from the ledger balances and the claim supply
        read together at the start, not from cached reserves, so tokens sent
        to the pool outside of deposits are shared with claim holders.

        Raises:
            Expired, InvalidPair, InvalidAmount, InvalidAddress,
            InsufficientBalance, InsufficientLiquidityBurned,
            SlippageExceeded, TransferFailed
        """
        with self._operation("remove_liquidity"):
            now = self._check_deadline(deadline)
            flipped = self._check_pair(token_a, token_b)
            caller, to = self._check_address("caller", caller), self._check_address("to", to)
            self._check_amount("liquidity", liquidity, positive=True)
            self._check_amount("amount_a_min", amount_a_min)
            self._check_amount("amount_b_min", amount_b_min)

            min_a, min_b = (amount_b_min, amount_a_min) if flipped else (amount_a_min, amount_b_min)

            claim = self.claim_token
            held = claim.balance_of(caller)
            if held < liquidity:
                raise InsufficientBalance(
                    f"caller holds {held} claim tokens, tried to burn {liquidity}"
                )

            balance_a, balance_b = self._balances()
            total_supply = claim.total_supply()
            amount_a, amount_b = liquidity_to_amounts(liquidity, balance_a, balance_b, total_supply)
            if amount_a == 0 or amount_b == 0:
                raise InsufficientLiquidityBurned(
                    f"burning {liquidity} pays out ({amount_a}, {amount_b})"
                )
            if amount_a < min_a:
                raise SlippageExceeded(f"amount_a {amount_a} below minimum {min_a}")
            if amount_b < min_b:
                raise SlippageExceeded(f"amount_b {amount_b} below minimum {min_b}")

            state = self.state
            claim.burn(caller, liquidity)
            self._push(state.token_a, to, amount_a)
            self._push(state.token_b, to, amount_b)
            self.state.total_supply = claim.total_supply()
            self._update(*self._balances(), now)

            if flipped:
                amount_a, amount_b = amount_b, amount_a
            event = LiquidityRemoved(
                pool=state.address,
                timestamp=now,
                user=caller,
                token_a=normalize_address(token_a),
                token_b=normalize_address(token_b),
                amount_a=amount_a,
                amount_b=amount_b,
                liquidity=liquidity,
            )
            logger.info(
                "liquidity_removed",
                pool=state.address,
                user=caller,
                to=to,
                amount_a=amount_a,
                amount_b=amount_b,
                liquidity=liquidity,
            )

        self._emit(event)
        return RemoveLiquidityResult(amount_a=amount_a, amount_b=amount_b, liquidity=liquidity)

    # --- Swaps ---

    def swap_exact_tokens_for_tokens(
        self,
        caller: str,
        amount_in: int,
        amount_out_min: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> SwapResult:
        """Sell exactly amount_in of path[0] for as much path[1] as the curve gives.

        Raises:
            Expired, InvalidPair, InvalidAmount, InvalidAddress,
            InsufficientLiquidity, InsufficientOutputAmount,
            SlippageExceeded, InsufficientBalance, TransferFailed
        """
        with self._operation("swap_exact_tokens_for_tokens"):
            now = self._check_deadline(deadline)
            token_in, token_out = self._check_path(path)
            caller, to = self._check_address("caller", caller), self._check_address("to", to)
            self._check_swap_recipient(to)
            self._check_amount("amount_in", amount_in, positive=True)
            self._check_amount("amount_out_min", amount_out_min)

            reserve_in, reserve_out = self._swap_reserves(token_in)
            amount_out = get_amount_out(
                amount_in, reserve_in, reserve_out, self.config.fee_multiplier
            )
            if amount_out == 0:
                raise InsufficientOutputAmount(f"amount_in {amount_in} buys nothing")
            if amount_out < amount_out_min:
                raise SlippageExceeded(f"amount_out {amount_out} below minimum {amount_out_min}")

            event = self._execute_swap(caller, token_in, token_out, amount_in, amount_out, to, now)

        self._emit(event)
        return SwapResult(
            token_in=token_in, token_out=token_out, amount_in=amount_in, amount_out=amount_out
        )

    def swap_tokens_for_exact_tokens(
        self,
        caller: str,
        amount_out: int,
        amount_in_max: int,
        path: Sequence[str],
        to: str,
        deadline: int,
    ) -> SwapResult:
        """Buy exactly amount_out of path[1], paying at most amount_in_max of path[0].

        Raises:
            Expired, InvalidPair, InvalidAmount, InvalidAddress,
            InsufficientLiquidity, ExcessiveInputAmount,
            InsufficientBalance, TransferFailed
        """
        with self._operation("swap_tokens_for_exact_tokens"):
            now = self._check_deadline(deadline)
            token_in, token_out = self._check_path(path)
            caller, to = self._check_address("caller", caller), self._check_address("to", to)
            self._check_swap_recipient(to)
            self._check_amount("amount_out", amount_out, positive=True)
            self._check_amount("amount_in_max", amount_in_max)

            reserve_in, reserve_out = self._swap_reserves(token_in)
            amount_in = get_amount_in(
                amount_out, reserve_in, reserve_out, self.config.fee_multiplier
            )
            if amount_in > amount_in_max:
                raise ExcessiveInputAmount(f"amount_in {amount_in} above maximum {amount_in_max}")

            event = self._execute_swap(caller, token_in, token_out, amount_in, amount_out, to, now)

        self._emit(event)
        return SwapResult(
            token_in=token_in, token_out=token_out, amount_in=amount_in, amount_out=amount_out
        )

    # --- Reconciliation ---

    def sync(self) -> tuple[int, int]:
        """Set reserves to the pool's current ledger balances."""
        with self._operation("sync"):
            now = self.clock.now()
            balance_a, balance_b = self._balances()
            self._update(balance_a, balance_b, now)
            event = Synced(
                pool=self.address, timestamp=now, reserve_a=balance_a, reserve_b=balance_b
            )
            logger.info(
                "reserves_synced", pool=self.address, reserve_a=balance_a, reserve_b=balance_b
            )

        self._emit(event)
        return balance_a, balance_b

    def skim(self, to: str) -> tuple[int, int]:
        """Send any balance held above the recorded reserves to `to`."""
        with self._operation("skim"):
            to = self._check_address("to", to)
            balance_a, balance_b = self._balances()
            excess_a = S(balance_a) - self.state.reserve_a
            excess_b = S(balance_b) - self.state.reserve_b
            if excess_a:
                self._push(self.state.token_a, to, excess_a.value)
            if excess_b:
                self._push(self.state.token_b, to, excess_b.value)
            logger.info(
                "excess_skimmed",
                pool=self.address,
                to=to,
                amount_a=excess_a.value,
                amount_b=excess_b.value,
            )

        return excess_a.value, excess_b.value

    # --- Internals ---

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Guard, transaction and state rollback around one mutating operation."""
        with self._guard.enter(name):
            snapshot = replace(self.state)
            try:
                with self.ledger.transaction():
                    yield
            except BaseException as err:
                self.state = snapshot
                if isinstance(err, (PoolError, SafeIntError)):
                    logger.debug(
                        "operation_rejected",
                        pool=self.state.address,
                        operation=name,
                        error=type(err).__name__,
                        reason=str(err),
                    )
                raise

    def _check_deadline(self, deadline: int) -> int:
        now = self.clock.now()
        if now > deadline:
            raise Expired(f"deadline {deadline} passed (now {now})")
        return now

    def _check_pair(self, token_a: str, token_b: str) -> bool:
        """Validate a pair; returns True if given in reverse pool order."""
        if not self.state.matches(token_a, token_b):
            raise InvalidPair(f"({token_a}, {token_b}) is not this pool's pair")
        return normalize_address(token_a) == self.state.token_b

    def _check_path(self, path: Sequence[str]) -> tuple[str, str]:
        if isinstance(path, str) or len(path) != 2:
            raise InvalidPair(f"path must name exactly two assets, got {path!r}")
        token_in, token_out = path
        self._check_pair(token_in, token_out)
        return normalize_address(token_in), normalize_address(token_out)

    @staticmethod
    def _check_address(name: str, value: str) -> str:
        if not isinstance(value, str) or not is_valid_address(normalize_address(value)):
            raise InvalidAddress(f"Invalid {name} address: {value!r}")
        return normalize_address(value)

    def _check_swap_recipient(self, to: str) -> None:
        # Paying the pool itself would leave reserve_out short of its ledger balance
        if to == self.address:
            raise InvalidAddress(f"swap recipient cannot be the pool itself: {to}")

    @staticmethod
    def _check_amount(name: str, value: int, *, positive: bool = False) -> None:
        if not is_uint256(value):
            raise InvalidAmount(f"{name} must be a uint256 integer, got {value!r}")
        if positive and value == 0:
            raise InvalidAmount(f"{name} must be positive")

    def _check_minimum(self, name: str, value: int, desired: int) -> None:
        self._check_amount(name, value)
        if value > desired:
            raise InvalidAmount(f"{name} {value} exceeds desired amount {desired}")

    def _swap_reserves(self, token_in: str) -> tuple[int, int]:
        reserve_in, reserve_out = self.state.orient(token_in)
        if reserve_in == 0 or reserve_out == 0:
            raise InsufficientLiquidity("pool has no reserves to swap against")
        return reserve_in, reserve_out

    def _execute_swap(
        self,
        caller: str,
        token_in: str,
        token_out: str,
        amount_in: int,
        amount_out: int,
        to: str,
        now: int,
    ) -> Swapped:
        reserve_in, reserve_out = self.state.orient(token_in)
        self._require_funds(token_in, caller, amount_in)

        self._pull(token_in, caller, amount_in)
        self._push(token_out, to, amount_out)

        # The fee stays in the pool: the whole amount_in joins the reserve
        new_in = (S(reserve_in) + amount_in).value
        new_out = (S(reserve_out) - amount_out).value
        if not product_not_decreased(
            reserve_in, reserve_out, new_in, new_out, amount_in, self.config.fee_multiplier
        ):
            raise InvariantViolation(
                f"reserve product decreased: ({reserve_in}, {reserve_out}) -> ({new_in}, {new_out})"
            )

        if token_in == self.state.token_a:
            self._update(new_in, new_out, now)
        else:
            self._update(new_out, new_in, now)

        logger.info(
            "swapped",
            pool=self.address,
            user=caller,
            to=to,
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return Swapped(
            pool=self.address,
            timestamp=now,
            user=caller,
            token_in=token_in,
            token_out=token_out,
            amount_in=amount_in,
            amount_out=amount_out,
        )

    def _balances(self) -> tuple[int, int]:
        """Ledger balances of the pool, in pool order."""
        return (
            self.ledger.token(self.state.token_a).balance_of(self.address),
            self.ledger.token(self.state.token_b).balance_of(self.address),
        )

    def _require_funds(self, token: str, owner: str, amount: int) -> None:
        handle = self.ledger.token(token)
        balance = handle.balance_of(owner)
        if balance < amount:
            raise InsufficientBalance(f"{owner} holds {balance} of {token}, needs {amount}")
        allowance = handle.allowance(owner, self.address)
        if allowance < amount:
            raise InsufficientBalance(
                f"{owner} approved {allowance} of {token} to the pool, needs {amount}"
            )

    def _pull(self, token: str, owner: str, amount: int) -> None:
        if not self.ledger.token(token).transfer_from(self.address, owner, self.address, amount):
            raise TransferFailed(f"pulling {amount} of {token} from {owner} failed")

    def _push(self, token: str, to: str, amount: int) -> None:
        if not self.ledger.token(token).transfer(self.address, to, amount):
            raise TransferFailed(f"sending {amount} of {token} to {to} failed")

    def _update(self, reserve_a: int, reserve_b: int, now: int) -> None:
        self.state.reserve_a = S(reserve_a).value
        self.state.reserve_b = S(reserve_b).value
        self.state.block_timestamp_last = now

    def _emit(self, event: PoolEvent) -> None:
        """Record event and notify subscribers.

        The operation has already committed, so a failing subscriber is
        logged and skipped rather than reported to the caller.
        """
        self.events.append(event)
        for callback in self._subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(
                    "subscriber_failed", pool=self.address, event_type=type(event).__name__
                )

"""The vault: one principal, two balances, one engine."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable

from ..adapters.price_adapters.base import BasePriceSource
from ..adapters.swap_adapters.base import BaseQuoter, BaseSwapRouter
from ..adapters.token_adapters.base import BaseTokenAdapter, BaseWrappedNativeAdapter
from ..constants import (
    DEFAULT_POOL_FEE,
    DEFAULT_QUOTE_PROBE_AMOUNT,
    DEFAULT_TRADE_DEADLINE_SECONDS,
    PERCENT_DENOMINATOR,
    VAULT_VERSION,
)
from ..domain import RebalanceOutcome, TradeDirection
from ..errors import InvalidAmount, TransferFailed, VaultError, ZeroAddress
from ..events import (
    AccountClosed,
    Bought,
    DividendsDistributed,
    EventLog,
    NativeWrapped,
    OwnershipTransferred,
    PriceUpdated,
    Rebalanced,
    Sold,
    VaultEvent,
)
from ..store import VaultState, VaultStateStore
from .access import AccessGuard, is_zero_address
from .accountant import PortfolioAccountant
from .dividends import DividendScheduler
from .oracle import PriceOracle
from .rebalance import RebalanceEngine
from .swap import SwapVenue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VaultPolicy:
    """Per-vault parameters, fixed when the vault is provisioned."""

    target_stable_percentage: int
    dividend_percentage: int
    dividend_interval_seconds: int
    pool_fee: int = DEFAULT_POOL_FEE
    trade_deadline_seconds: int = DEFAULT_TRADE_DEADLINE_SECONDS
    min_output_bps: int = 0
    max_price_age_seconds: int | None = None
    quote_probe_amount: int = DEFAULT_QUOTE_PROBE_AMOUNT
    price_warning_tolerance_percentage: float = 1.0
    native_reserve_wei: int = 0


@dataclass(frozen=True)
class VaultStatus:
    """Point-in-time read of everything the dashboard shows."""

    vault_address: str
    principal: str | None
    stable_balance: int
    volatile_balance: int
    native_balance: int
    price: int
    total_value: int
    stable_percentage: int | None
    target_stable_percentage: int
    next_dividend_time: int
    seconds_until_dividend: int
    last_market_quote: int | None
    version: int


class Vault:
    """Custodies a stable and a volatile balance on behalf of one principal.

    Every mutating operation runs under the vault's lock, so operations on
    one vault never interleave. Events raised while an operation runs are
    held back and only published, together with the persisted state, once
    the operation has completed; a failed operation publishes nothing.

    Owner-gated operations take the caller explicitly and check it against
    the stored principal before doing anything else.
    """

    def __init__(
        self,
        *,
        address: str,
        stable: BaseTokenAdapter,
        volatile: BaseWrappedNativeAdapter,
        price_source: BasePriceSource,
        router: BaseSwapRouter,
        quoter: BaseQuoter | None,
        policy: VaultPolicy,
        state: VaultState,
        clock: Callable[[], int],
        events: EventLog | None = None,
        store: VaultStateStore | None = None,
    ):
        self.address = address
        self.stable = stable
        self.volatile = volatile
        self.policy = policy
        self.clock = clock
        self.events = events if events is not None else EventLog()
        self.store = store
        self.last_market_quote = state.last_market_quote
        self._lock = asyncio.Lock()

        self.guard = AccessGuard(state.principal)
        self.oracle = PriceOracle(
            price_source,
            quoter,
            volatile_token=volatile.address,
            stable_token=stable.address,
            clock=clock,
            pool_fee=policy.pool_fee,
            quote_probe_amount=policy.quote_probe_amount,
            max_price_age_seconds=policy.max_price_age_seconds,
            warning_tolerance_percentage=policy.price_warning_tolerance_percentage,
        )
        self.accountant = PortfolioAccountant(stable, volatile, address)
        self.venue = SwapVenue(
            router,
            stable=stable,
            volatile=volatile,
            vault_address=address,
            clock=clock,
            pool_fee=policy.pool_fee,
            deadline_seconds=policy.trade_deadline_seconds,
        )
        self.engine = RebalanceEngine(
            self.accountant,
            self.oracle,
            self.venue,
            target_stable_percentage=policy.target_stable_percentage,
            min_output_bps=policy.min_output_bps,
        )
        self.scheduler = DividendScheduler(
            stable,
            vault_address=address,
            dividend_percentage=policy.dividend_percentage,
            interval_seconds=policy.dividend_interval_seconds,
            next_dividend_time=state.next_dividend_time,
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @staticmethod
    def version() -> int:
        return VAULT_VERSION

    @property
    def principal(self) -> str | None:
        return self.guard.principal

    @property
    def next_dividend_time(self) -> int:
        return self.scheduler.next_dividend_time

    @property
    def state(self) -> VaultState:
        return VaultState(
            principal=self.principal,
            next_dividend_time=self.next_dividend_time,
            last_market_quote=self.last_market_quote,
        )

    async def stable_balance(self) -> int:
        return await self.stable.balance_of(self.address)

    async def volatile_balance(self) -> int:
        return await self.volatile.balance_of(self.address)

    async def native_balance(self) -> int:
        return await self.volatile.native_balance_of(self.address)

    async def authoritative_price(self) -> int:
        return await self.oracle.authoritative_price()

    async def total_value(self) -> int:
        snapshot = await self.accountant.snapshot()
        price = await self.oracle.authoritative_price()
        return self.accountant.total_value(snapshot, price)

    async def status(self) -> VaultStatus:
        snapshot = await self.accountant.snapshot()
        price = await self.oracle.authoritative_price()
        native = await self.native_balance()
        total = self.accountant.total_value(snapshot, price)
        return VaultStatus(
            vault_address=self.address,
            principal=self.principal,
            stable_balance=snapshot.stable,
            volatile_balance=snapshot.volatile,
            native_balance=native,
            price=price,
            total_value=total,
            stable_percentage=(
                snapshot.stable * PERCENT_DENOMINATOR // total if total else None
            ),
            target_stable_percentage=self.policy.target_stable_percentage,
            next_dividend_time=self.next_dividend_time,
            seconds_until_dividend=self.scheduler.seconds_until_due(),
            last_market_quote=self.last_market_quote,
            version=self.version(),
        )

    # ------------------------------------------------------------------
    # Operation discipline
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _operation(
        self, name: str, caller: str | None = None, *, gated: bool = True
    ) -> AsyncIterator[list[VaultEvent]]:
        async with self._lock:
            if gated:
                self.guard.require(caller)
            logger.debug("Starting %s (caller %s)", name, caller)
            pending: list[VaultEvent] = []
            try:
                yield pending
            except VaultError as e:
                logger.warning("%s aborted: %s", name, e.reason)
                raise
            self._commit(pending)
            logger.debug("Completed %s", name)

    def _commit(self, pending: list[VaultEvent]) -> None:
        if self.store is not None:
            self.store.save(self.state)
        self.events.publish(pending)

    # ------------------------------------------------------------------
    # Owner-gated mutations
    # ------------------------------------------------------------------

    async def rebalance(self, caller: str) -> RebalanceOutcome:
        async with self._operation("rebalance", caller) as pending:
            outcome = await self.engine.rebalance()
            if outcome.fill is not None:
                if outcome.plan.direction is TradeDirection.SELL_VOLATILE:
                    pending.append(
                        Sold(amount_in=outcome.fill.amount_in, amount_out=outcome.fill.amount_out)
                    )
                else:
                    pending.append(
                        Bought(amount_in=outcome.fill.amount_in, amount_out=outcome.fill.amount_out)
                    )
            pending.append(
                Rebalanced(
                    stable_balance=outcome.after.stable,
                    volatile_balance=outcome.after.volatile,
                )
            )
        return outcome

    async def distribute_dividends(self, caller: str) -> int:
        async with self._operation("distribute_dividends", caller) as pending:
            amount = await self.scheduler.distribute(self.principal)
            pending.append(DividendsDistributed(amount=amount))
        return amount

    async def transfer_ownership(
        self, caller: str, new_principal: str
    ) -> OwnershipTransferred:
        async with self._operation("transfer_ownership", caller) as pending:
            event = self.guard.transfer_ownership(caller, new_principal)
            pending.append(event)
        return event

    async def close_account(self, caller: str) -> AccountClosed:
        """Sweep both token balances to the principal.

        Both legs are simulated before either is sent, so a token that would
        refuse its transfer fails the close with nothing moved.
        """
        async with self._operation("close_account", caller) as pending:
            principal = self.principal
            if is_zero_address(principal):
                raise ZeroAddress("Principal address is not set")
            snapshot = await self.accountant.snapshot()

            legs = [
                (token, amount)
                for token, amount in (
                    (self.stable, snapshot.stable),
                    (self.volatile, snapshot.volatile),
                )
                if amount > 0
            ]
            for token, amount in legs:
                if not await token.can_transfer(principal, amount):
                    raise TransferFailed(
                        f"Sweep of {amount} {token.address} to {principal} would fail"
                    )

            for token, amount in legs:
                if not await token.transfer(principal, amount):
                    raise TransferFailed(
                        f"Sweep of {amount} {token.address} to {principal} failed"
                    )

            event = AccountClosed(
                stable_amount=snapshot.stable, volatile_amount=snapshot.volatile
            )
            pending.append(event)
        return event

    # ------------------------------------------------------------------
    # Open mutations
    # ------------------------------------------------------------------

    async def wrap_native(self, amount: int | None = None) -> int:
        """Convert native currency held by the vault into the volatile asset.

        Wraps everything above ``native_reserve_wei`` unless ``amount`` is given.
        """
        async with self._operation("wrap_native", gated=False) as pending:
            native = await self.native_balance()
            available = max(0, native - self.policy.native_reserve_wei)
            to_wrap = available if amount is None else amount
            if to_wrap <= 0:
                raise InvalidAmount("No native balance to wrap")
            if to_wrap > available:
                raise InvalidAmount(
                    f"Cannot wrap {to_wrap}: only {available} available above reserve"
                )
            if not await self.volatile.deposit(to_wrap):
                raise TransferFailed(f"Wrapping {to_wrap} native units failed")
            pending.append(NativeWrapped(amount=to_wrap))
        return to_wrap

    async def refresh_market_quote(self) -> int:
        """Record the venue's quote for the probe size. Informational only."""
        async with self._operation("refresh_market_quote", gated=False) as pending:
            amount_out = await self.oracle.market_quote()
            await self.oracle.check_market_deviation(
                self.policy.quote_probe_amount, amount_out
            )
            self.last_market_quote = amount_out
            pending.append(PriceUpdated(price=amount_out))
        return amount_out

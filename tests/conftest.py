from __future__ import annotations

from typing import Callable

import pytest
from web3 import Web3

from stable_vault.adapters.price_adapters.base import BasePriceSource
from stable_vault.adapters.swap_adapters.base import BaseQuoter, BaseSwapRouter
from stable_vault.adapters.token_adapters.base import BaseWrappedNativeAdapter
from stable_vault.constants import PRICE_SCALE
from stable_vault.domain import RoundData, SwapParams
from stable_vault.engine.vault import Vault, VaultPolicy
from stable_vault.errors import SwapFailure
from stable_vault.events import EventLog
from stable_vault.store import VaultState, VaultStateStore

VAULT = Web3.to_checksum_address("0x" + "11" * 20)
PRINCIPAL = Web3.to_checksum_address("0x" + "22" * 20)
STRANGER = Web3.to_checksum_address("0x" + "33" * 20)
NEW_PRINCIPAL = Web3.to_checksum_address("0x" + "44" * 20)
STABLE_TOKEN = Web3.to_checksum_address("0x" + "aa" * 20)
VOLATILE_TOKEN = Web3.to_checksum_address("0x" + "bb" * 20)
ROUTER = Web3.to_checksum_address("0x" + "cc" * 20)

START_TIME = 1_700_000_000
ONE_MONTH = 30 * 24 * 60 * 60
ORACLE_PRICE = 3000 * 10**18


class FakeClock:
    def __init__(self, now: int = START_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class FakeToken(BaseWrappedNativeAdapter):
    """In-memory token that moves balances out of ``owner`` on transfer."""

    def __init__(self, address: str, owner: str):
        self._address = address
        self.owner = owner
        self.balances: dict[str, int] = {}
        self.allowances: dict[tuple[str, str], int] = {}
        self.native: dict[str, int] = {}
        self.approve_calls: list[tuple[str, int]] = []
        self.fail_transfer = False
        self.fail_approve = False
        self.fail_deposit = False

    @property
    def address(self) -> str:
        return self._address

    @property
    def adapter_name(self) -> str:
        return "fake"

    async def balance_of(self, holder: str) -> int:
        return self.balances.get(holder, 0)

    async def transfer(self, to: str, amount: int) -> bool:
        if self.fail_transfer or self.balances.get(self.owner, 0) < amount:
            return False
        self.balances[self.owner] -= amount
        self.balances[to] = self.balances.get(to, 0) + amount
        return True

    async def can_transfer(self, to: str, amount: int) -> bool:
        return not self.fail_transfer and self.balances.get(self.owner, 0) >= amount

    async def approve(self, spender: str, amount: int) -> bool:
        self.approve_calls.append((spender, amount))
        if self.fail_approve:
            return False
        self.allowances[(self.owner, spender)] = amount
        return True

    async def allowance(self, owner: str, spender: str) -> int:
        return self.allowances.get((owner, spender), 0)

    async def native_balance_of(self, holder: str) -> int:
        return self.native.get(holder, 0)

    async def deposit(self, amount: int) -> bool:
        if self.fail_deposit or self.native.get(self.owner, 0) < amount:
            return False
        self.native[self.owner] -= amount
        self.balances[self.owner] = self.balances.get(self.owner, 0) + amount
        return True


class FakePriceSource(BasePriceSource):
    def __init__(self, answer: int = 3000 * 10**8, decimals: int = 8, updated_at: int = START_TIME):
        self.answer = answer
        self._decimals = decimals
        self.updated_at = updated_at

    @property
    def adapter_name(self) -> str:
        return "fake_feed"

    async def latest_round_data(self) -> RoundData:
        return RoundData(
            round_id=1,
            answer=self.answer,
            started_at=self.updated_at,
            updated_at=self.updated_at,
            answered_in_round=1,
        )

    async def decimals(self) -> int:
        return self._decimals


class FakeRouter(BaseSwapRouter):
    """Fills every swap at ``price`` (18 decimals, stable per volatile) with no fee."""

    def __init__(self, stable: FakeToken, volatile: FakeToken, clock: FakeClock, price: int = ORACLE_PRICE):
        self.tokens = {stable.address: stable, volatile.address: volatile}
        self.stable = stable
        self.volatile = volatile
        self.clock = clock
        self.price = price
        self.calls: list[SwapParams] = []
        self.fail_with: str | None = None

    @property
    def address(self) -> str:
        return ROUTER

    @property
    def adapter_name(self) -> str:
        return "fake_router"

    async def exact_input_single(self, params: SwapParams) -> int:
        self.calls.append(params)
        if self.fail_with is not None:
            raise SwapFailure(self.fail_with)
        if params.deadline < self.clock():
            raise SwapFailure("Transaction too old")

        token_in = self.tokens[params.token_in]
        token_out = self.tokens[params.token_out]
        key = (params.recipient, self.address)
        if token_in.allowances.get(key, 0) < params.amount_in:
            raise SwapFailure("STF")

        if token_in is self.volatile:
            amount_out = params.amount_in * self.price // PRICE_SCALE
        else:
            amount_out = params.amount_in * PRICE_SCALE // self.price
        if amount_out < params.amount_out_minimum:
            raise SwapFailure("Too little received")

        token_in.allowances[key] -= params.amount_in
        token_in.balances[params.recipient] -= params.amount_in
        token_out.balances[params.recipient] = (
            token_out.balances.get(params.recipient, 0) + amount_out
        )
        return amount_out


class FakeQuoter(BaseQuoter):
    def __init__(self, amount_out: int = ORACLE_PRICE):
        self.amount_out = amount_out
        self.calls: list[tuple] = []

    @property
    def adapter_name(self) -> str:
        return "fake_quoter"

    async def quote(self, token_in, token_out, fee, amount_in, sqrt_price_limit_x96=0) -> int:
        self.calls.append((token_in, token_out, fee, amount_in, sqrt_price_limit_x96))
        return self.amount_out * amount_in // PRICE_SCALE


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stable() -> FakeToken:
    return FakeToken(STABLE_TOKEN, VAULT)


@pytest.fixture
def volatile() -> FakeToken:
    return FakeToken(VOLATILE_TOKEN, VAULT)


@pytest.fixture
def price_source() -> FakePriceSource:
    return FakePriceSource()


@pytest.fixture
def router(stable, volatile, clock) -> FakeRouter:
    return FakeRouter(stable, volatile, clock)


@pytest.fixture
def quoter() -> FakeQuoter:
    return FakeQuoter()


@pytest.fixture
def make_vault(stable, volatile, price_source, router, quoter, clock) -> Callable[..., Vault]:
    """Factory for a vault wired to the in-memory fakes.

    Balances are seeded on the fake tokens; policy fields can be overridden
    by keyword.
    """

    def _make(
        *,
        stable_balance: int = 0,
        volatile_balance: int = 0,
        principal: str | None = PRINCIPAL,
        next_dividend_time: int | None = None,
        store: VaultStateStore | None = None,
        **policy_overrides,
    ) -> Vault:
        stable.balances[VAULT] = stable_balance
        volatile.balances[VAULT] = volatile_balance
        policy_kwargs = {
            "target_stable_percentage": 40,
            "dividend_percentage": 10,
            "dividend_interval_seconds": ONE_MONTH,
        }
        policy_kwargs.update(policy_overrides)
        policy = VaultPolicy(**policy_kwargs)
        state = VaultState(
            principal=principal,
            next_dividend_time=(
                clock() + policy.dividend_interval_seconds
                if next_dividend_time is None
                else next_dividend_time
            ),
        )
        return Vault(
            address=VAULT,
            stable=stable,
            volatile=volatile,
            price_source=price_source,
            router=router,
            quoter=quoter,
            policy=policy,
            state=state,
            clock=clock,
            events=EventLog(),
            store=store,
        )

    return _make

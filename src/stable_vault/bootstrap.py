"""Wire a Vault to its on-chain collaborators from settings."""

from __future__ import annotations

import logging
import time
from typing import Callable

from web3 import Web3

from .adapters.price_adapters.chainlink import ChainlinkPriceSource
from .adapters.swap_adapters.uniswap_v3 import UniswapV3Quoter, UniswapV3Router
from .adapters.token_adapters.erc20 import ERC20TokenAdapter, WrappedNativeTokenAdapter
from .clients.chain import ChainClient
from .engine.vault import Vault, VaultPolicy
from .events import EventLog
from .settings import VaultSettings
from .store import VaultState, VaultStateStore

logger = logging.getLogger(__name__)


def system_clock() -> int:
    return int(time.time())


def policy_from_settings(settings: VaultSettings) -> VaultPolicy:
    return VaultPolicy(
        target_stable_percentage=settings.target_stable_percentage,
        dividend_percentage=settings.dividend_percentage,
        dividend_interval_seconds=settings.dividend_interval_seconds,
        pool_fee=settings.pool_fee,
        trade_deadline_seconds=settings.trade_deadline_seconds,
        min_output_bps=settings.min_output_bps,
        max_price_age_seconds=settings.max_price_age_seconds,
        quote_probe_amount=settings.quote_probe_amount,
        price_warning_tolerance_percentage=settings.price_warning_tolerance_percentage,
        native_reserve_wei=settings.native_reserve_wei,
    )


def load_or_provision_state(
    settings: VaultSettings, store: VaultStateStore, now: int
) -> VaultState:
    """Load persisted vault state, creating it on first use.

    A new vault takes its principal from settings and schedules its first
    dividend one interval after provisioning.
    """
    state = store.load()
    if state is not None:
        return state

    principal = (
        Web3.to_checksum_address(settings.principal_address)
        if settings.principal_address
        else None
    )
    state = VaultState(
        principal=principal,
        next_dividend_time=now + settings.dividend_interval_seconds,
    )
    store.save(state)
    logger.info(
        "Provisioned vault state at %s (principal %s, first dividend at %d)",
        store.path,
        principal,
        state.next_dividend_time,
    )
    return state


def build_vault(
    settings: VaultSettings,
    *,
    clock: Callable[[], int] = system_clock,
    client: ChainClient | None = None,
    events: EventLog | None = None,
) -> Vault:
    """Construct a Vault backed by web3 adapters.

    Raises:
        ValueError: If a required address or the signing key is missing.
    """
    private_key = (
        settings.private_key.get_secret_value() if settings.private_key else None
    )
    client = client or ChainClient(
        settings.rpc_url_required,
        private_key,
        receipt_timeout=settings.tx_receipt_timeout,
    )
    vault_address = Web3.to_checksum_address(
        settings.vault_address or client.address
    )
    if client.account is not None and vault_address != client.address:
        raise ValueError(
            f"vault_address {vault_address} does not match signing account {client.address}"
        )

    stable = ERC20TokenAdapter(client, settings.stable_token_address_required, "STABLE")
    volatile = WrappedNativeTokenAdapter(
        client, settings.volatile_token_address_required, "VOLATILE"
    )
    price_source = ChainlinkPriceSource(client, settings.price_feed_address_required)
    router = UniswapV3Router(client, settings.swap_router_address_required)
    quoter = (
        UniswapV3Quoter(client, settings.quoter_address)
        if settings.quoter_address
        else None
    )

    store = VaultStateStore(settings.state_path)
    state = load_or_provision_state(settings, store, clock())

    return Vault(
        address=vault_address,
        stable=stable,
        volatile=volatile,
        price_source=price_source,
        router=router,
        quoter=quoter,
        policy=policy_from_settings(settings),
        state=state,
        clock=clock,
        events=events,
        store=store,
    )

"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    DEFAULT_DIVIDEND_INTERVAL_SECONDS,
    DEFAULT_MAINNET_RPC_URL,
    DEFAULT_POOL_FEE,
    DEFAULT_QUOTE_PROBE_AMOUNT,
    DEFAULT_SEPOLIA_RPC_URL,
    DEFAULT_TRADE_DEADLINE_SECONDS,
    DEFAULT_TX_RECEIPT_TIMEOUT,
    MAINNET_ADDRESSES,
    SEPOLIA_ADDRESSES,
    NetworkAddresses,
)

load_dotenv()

SECRET_FIELDS = {"private_key"}


class Network(str, Enum):
    MAINNET = "mainnet"
    SEPOLIA = "sepolia"


NETWORK_RPC_DEFAULTS = {
    Network.MAINNET: DEFAULT_MAINNET_RPC_URL,
    Network.SEPOLIA: DEFAULT_SEPOLIA_RPC_URL,
}


class VaultSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with STABLE_VAULT_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- chain / signing ---
    network: Network = Network.MAINNET
    rpc_url: str | None = None
    private_key: SecretStr | None = None
    tx_receipt_timeout: float = Field(default=DEFAULT_TX_RECEIPT_TIMEOUT, gt=0)

    # --- identities ---
    vault_address: str | None = None
    principal_address: str | None = None
    caller_address: str | None = None

    # --- collaborators (network defaults apply when unset) ---
    stable_token_address: str | None = None
    volatile_token_address: str | None = None
    price_feed_address: str | None = None
    swap_router_address: str | None = None
    quoter_address: str | None = None

    # --- allocation & dividends (fixed for the life of a vault) ---
    target_stable_percentage: int = Field(default=50, ge=0, le=100)
    dividend_percentage: int = Field(default=10, ge=0, le=100)
    dividend_interval_seconds: int = Field(
        default=DEFAULT_DIVIDEND_INTERVAL_SECONDS, ge=0
    )

    # --- trade policy ---
    pool_fee: int = Field(default=DEFAULT_POOL_FEE, gt=0)
    trade_deadline_seconds: int = Field(default=DEFAULT_TRADE_DEADLINE_SECONDS, gt=0)
    min_output_bps: int = Field(
        default=0,
        ge=0,
        le=10_000,
        description="Slippage floor in basis points of the oracle-valued output. 0 disables it.",
    )
    max_price_age_seconds: int | None = Field(
        default=None,
        gt=0,
        description="Reject oracle answers older than this. None disables the check.",
    )

    # --- market quote telemetry ---
    quote_probe_amount: int = Field(default=DEFAULT_QUOTE_PROBE_AMOUNT, gt=0)
    price_warning_tolerance_percentage: float = Field(
        default=1.0,
        gt=0,
        lt=100.0,
        description="Warn when the market quote deviates from the oracle by more than this (%).",
    )

    # --- native wrapping ---
    native_reserve_wei: int = Field(default=0, ge=0)

    # --- persistence / logging ---
    state_path: Path = Path("stable-vault-state.json")
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="STABLE_VAULT_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("private_key", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def apply_network_defaults(self) -> "VaultSettings":
        """Fill unset RPC and collaborator addresses from the network defaults."""
        if self.rpc_url is None:
            self.rpc_url = NETWORK_RPC_DEFAULTS[self.network]

        defaults = self.addresses
        if self.stable_token_address is None:
            self.stable_token_address = defaults["STABLE"]
        if self.volatile_token_address is None:
            self.volatile_token_address = defaults["VOLATILE"]
        if self.price_feed_address is None:
            self.price_feed_address = defaults["PRICE_FEED"]
        if self.swap_router_address is None:
            self.swap_router_address = defaults["SWAP_ROUTER"]
        if self.quoter_address is None:
            self.quoter_address = defaults["QUOTER"]
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("STABLE_VAULT_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("stable-vault.toml")
                    user_config = (
                        Path.home() / ".config" / "stable-vault" / "config.toml"
                    )
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [stable_vault]
                body = data.get("stable_vault", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a JSON-friendly dict with secrets redacted."""
        data = self.model_dump(mode="json")
        if self.private_key:
            data["private_key"] = "***redacted***"
        return data

    @property
    def addresses(self) -> NetworkAddresses:
        network_addresses_map = {
            Network.MAINNET: MAINNET_ADDRESSES,
            Network.SEPOLIA: SEPOLIA_ADDRESSES,
        }
        if self.network not in network_addresses_map:
            raise ValueError(f"Unknown network: {self.network}")
        return network_addresses_map[self.network]

    @property
    def rpc_url_required(self) -> str:
        if self.rpc_url is None:
            raise ValueError("rpc_url must be configured")
        return self.rpc_url

    @property
    def private_key_required(self) -> str:
        if self.private_key is None:
            raise ValueError("private_key must be configured")
        return self.private_key.get_secret_value()

    @property
    def stable_token_address_required(self) -> str:
        if self.stable_token_address is None:
            raise ValueError("stable_token_address must be configured")
        return self.stable_token_address

    @property
    def volatile_token_address_required(self) -> str:
        if self.volatile_token_address is None:
            raise ValueError("volatile_token_address must be configured")
        return self.volatile_token_address

    @property
    def price_feed_address_required(self) -> str:
        if self.price_feed_address is None:
            raise ValueError("price_feed_address must be configured")
        return self.price_feed_address

    @property
    def swap_router_address_required(self) -> str:
        if self.swap_router_address is None:
            raise ValueError("swap_router_address must be configured")
        return self.swap_router_address

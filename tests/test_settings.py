"""Tests for settings configuration loading."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from stable_vault.constants import (
    DEFAULT_MAINNET_RPC_URL,
    MAINNET_ADDRESSES,
    SEPOLIA_ADDRESSES,
)
from stable_vault.settings import Network, VaultSettings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep local config files and the caller's environment out of each test."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STABLE_VAULT_CONFIG", raising=False)
    monkeypatch.delenv("STABLE_VAULT_PRIVATE_KEY", raising=False)
    monkeypatch.delenv("STABLE_VAULT_TARGET_STABLE_PERCENTAGE", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


def write_config(tmp_path: Path, body: str) -> Path:
    config_path = tmp_path / "config.toml"
    config_path.write_text(dedent(body).strip())
    return config_path


def test_loads_stable_vault_table(tmp_path, monkeypatch):
    config_path = write_config(
        tmp_path,
        """
        [stable_vault]
        network = "sepolia"
        target_stable_percentage = 40
        dividend_percentage = 5
        dividend_interval_seconds = 3600
        min_output_bps = 9900
        state_path = "state/vault.json"
        """,
    )
    monkeypatch.setenv("STABLE_VAULT_CONFIG", str(config_path))

    settings = VaultSettings()

    assert settings.network is Network.SEPOLIA
    assert settings.target_stable_percentage == 40
    assert settings.dividend_percentage == 5
    assert settings.dividend_interval_seconds == 3600
    assert settings.min_output_bps == 9900
    assert settings.state_path == Path("state/vault.json")


def test_top_level_keys_accepted(tmp_path, monkeypatch):
    config_path = write_config(tmp_path, "target_stable_percentage = 70")
    monkeypatch.setenv("STABLE_VAULT_CONFIG", str(config_path))

    assert VaultSettings().target_stable_percentage == 70


def test_local_config_file_discovered(tmp_path):
    (tmp_path / "stable-vault.toml").write_text("dividend_percentage = 3")

    assert VaultSettings().dividend_percentage == 3


def test_precedence_cli_over_env_over_file(tmp_path, monkeypatch):
    config_path = write_config(tmp_path, "target_stable_percentage = 30")
    monkeypatch.setenv("STABLE_VAULT_CONFIG", str(config_path))
    monkeypatch.setenv("STABLE_VAULT_TARGET_STABLE_PERCENTAGE", "60")

    assert VaultSettings().target_stable_percentage == 60
    assert VaultSettings(target_stable_percentage=80).target_stable_percentage == 80


def test_private_key_in_config_file_rejected(tmp_path, monkeypatch):
    config_path = write_config(
        tmp_path,
        """
        [stable_vault]
        private_key = "0xabc"
        """,
    )
    monkeypatch.setenv("STABLE_VAULT_CONFIG", str(config_path))

    with pytest.raises(ValueError, match="Security violation"):
        VaultSettings()


def test_private_key_from_env_is_redacted(monkeypatch):
    monkeypatch.setenv("STABLE_VAULT_PRIVATE_KEY", "0xsecret")

    settings = VaultSettings()

    assert settings.private_key_required == "0xsecret"
    assert settings.as_safe_dict()["private_key"] == "***redacted***"
    assert "0xsecret" not in str(settings.as_safe_dict())


def test_mainnet_defaults():
    settings = VaultSettings()

    assert settings.rpc_url == DEFAULT_MAINNET_RPC_URL
    assert settings.stable_token_address == MAINNET_ADDRESSES["STABLE"]
    assert settings.volatile_token_address == MAINNET_ADDRESSES["VOLATILE"]
    assert settings.price_feed_address == MAINNET_ADDRESSES["PRICE_FEED"]
    assert settings.quoter_address == MAINNET_ADDRESSES["QUOTER"]
    assert settings.swap_router_address is None
    with pytest.raises(ValueError, match="swap_router_address"):
        _ = settings.swap_router_address_required


def test_sepolia_defaults_and_explicit_override():
    router = "0x" + "cc" * 20
    settings = VaultSettings(network=Network.SEPOLIA, swap_router_address=router)

    assert settings.swap_router_address == router
    assert settings.quoter_address == SEPOLIA_ADDRESSES["QUOTER"]
    with pytest.raises(ValueError, match="stable_token_address"):
        _ = settings.stable_token_address_required


@pytest.mark.parametrize(
    "field, value",
    [
        ("target_stable_percentage", 101),
        ("dividend_percentage", -1),
        ("dividend_interval_seconds", -1),
        ("min_output_bps", 10_001),
        ("max_price_age_seconds", 0),
    ],
)
def test_out_of_range_values_rejected(field, value):
    with pytest.raises(ValidationError):
        VaultSettings(**{field: value})


def test_zero_interval_allowed():
    assert VaultSettings(dividend_interval_seconds=0).dividend_interval_seconds == 0


def test_log_level_normalised():
    assert VaultSettings(log_level="debug").log_level == "DEBUG"

from __future__ import annotations

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from conftest import PRINCIPAL, STRANGER, VAULT
from stable_vault.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "STABLE_VAULT_CONFIG",
        "STABLE_VAULT_PRIVATE_KEY",
        "STABLE_VAULT_CALLER_ADDRESS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("stable_vault.main.setup_logging", lambda *_: None)


@pytest.fixture
def vault(make_vault):
    vault = make_vault(stable_balance=0, volatile_balance=10**16)
    with patch("stable_vault.bootstrap.build_vault", return_value=vault):
        yield vault


def test_show_config_redacts_secrets(monkeypatch):
    monkeypatch.setenv("STABLE_VAULT_PRIVATE_KEY", "0xsecret")

    result = runner.invoke(app, ["--show-config"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["private_key"] == "***redacted***"
    assert data["network"] == "mainnet"


def test_status(vault):
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0, result.output
    assert "Stable Vault" in result.output
    assert "Holdings" in result.output


def test_rebalance_prints_events(vault):
    result = runner.invoke(app, ["rebalance", "--caller", PRINCIPAL])

    assert result.exit_code == 0, result.output
    assert "Sold" in result.output
    assert "Rebalanced" in result.output


def test_rebalance_by_stranger_fails(vault):
    result = runner.invoke(app, ["rebalance", "--caller", STRANGER])

    assert result.exit_code == 1
    assert "Only owner can call this function" in result.output
    assert len(vault.events) == 0


def test_caller_defaults_to_configured_address(vault, monkeypatch):
    monkeypatch.setenv("STABLE_VAULT_CALLER_ADDRESS", PRINCIPAL)

    result = runner.invoke(app, ["rebalance"])

    assert result.exit_code == 0, result.output


def test_caller_falls_back_to_signer(vault):
    # The signer is the vault account, which is not the principal here
    result = runner.invoke(app, ["rebalance"])

    assert result.exit_code == 1
    assert vault.address == VAULT


def test_close_requires_confirmation(vault):
    result = runner.invoke(app, ["close", "--caller", PRINCIPAL], input="n\n")

    assert result.exit_code == 1
    assert len(vault.events) == 0


def test_close_with_yes(vault):
    result = runner.invoke(app, ["close", "--caller", PRINCIPAL, "--yes"])

    assert result.exit_code == 0, result.output
    assert "AccountClosed" in result.output


def test_invalid_setting_is_bad_parameter():
    result = runner.invoke(
        app,
        ["--log-level", "info", "status"],
        env={"STABLE_VAULT_TARGET_STABLE_PERCENTAGE": "150"},
    )

    assert result.exit_code != 0

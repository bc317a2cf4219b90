from __future__ import annotations

import pytest

from conftest import NEW_PRINCIPAL, PRINCIPAL, STRANGER
from stable_vault.constants import ZERO_ADDRESS
from stable_vault.engine.access import AccessGuard, is_zero_address, normalize_address
from stable_vault.errors import AuthorizationError, ZeroAddress


@pytest.fixture
def guard():
    return AccessGuard(PRINCIPAL)


def test_principal_passes(guard):
    guard.require(PRINCIPAL)
    guard.require(PRINCIPAL.lower())


@pytest.mark.parametrize("caller", [STRANGER, None, "", "0x123"])
def test_non_principal_rejected(guard, caller):
    with pytest.raises(AuthorizationError, match="Only owner can call this function"):
        guard.require(caller)


def test_vault_without_principal_rejects_everyone():
    guard = AccessGuard(None)
    assert guard.principal is None
    with pytest.raises(AuthorizationError):
        guard.require(PRINCIPAL)


def test_transfer_ownership_takes_effect_immediately(guard):
    event = guard.transfer_ownership(PRINCIPAL, NEW_PRINCIPAL.lower())

    assert event.previous_principal == PRINCIPAL
    assert event.new_principal == NEW_PRINCIPAL
    assert guard.principal == NEW_PRINCIPAL
    guard.require(NEW_PRINCIPAL)
    with pytest.raises(AuthorizationError):
        guard.require(PRINCIPAL)


def test_transfer_ownership_by_stranger_changes_nothing(guard):
    with pytest.raises(AuthorizationError):
        guard.transfer_ownership(STRANGER, STRANGER)
    assert guard.principal == PRINCIPAL


@pytest.mark.parametrize("new_principal", [ZERO_ADDRESS, "", "not-an-address"])
def test_transfer_ownership_rejects_invalid_address(guard, new_principal):
    with pytest.raises(ZeroAddress):
        guard.transfer_ownership(PRINCIPAL, new_principal)
    assert guard.principal == PRINCIPAL


def test_normalize_address_checksums():
    assert normalize_address(PRINCIPAL.lower()) == PRINCIPAL


def test_is_zero_address():
    assert is_zero_address(None)
    assert is_zero_address(ZERO_ADDRESS)
    assert not is_zero_address(PRINCIPAL)

"""Failure taxonomy for vault operations.

Every error aborts the operation that raised it; nothing is retried here.
The message doubles as the stable, user-visible reason.
"""

from __future__ import annotations


class VaultError(Exception):
    """Base class for all vault operation failures."""

    default_reason = "Vault operation failed"

    def __init__(self, reason: str | None = None):
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class AuthorizationError(VaultError):
    default_reason = "Only owner can call this function"


class InvalidAmount(VaultError):
    default_reason = "Invalid amount"


class InsufficientBalance(InvalidAmount):
    default_reason = "Insufficient balance"


class InvalidPrice(VaultError):
    default_reason = "Invalid price"


class DivisionBoundaryError(VaultError):
    default_reason = "Total value is zero"


class NothingToTrade(VaultError):
    default_reason = "Nothing to trade"


class NothingToDistribute(VaultError):
    default_reason = "Nothing to distribute"


class ApprovalFailure(VaultError):
    default_reason = "Approval failed"


class SwapFailure(VaultError):
    default_reason = "Swap failed"


class ScheduleNotDue(VaultError):
    default_reason = "Dividend distribution not yet due"


class ScheduleNotConfigured(VaultError):
    default_reason = "Dividend interval not set"


class ZeroAddress(VaultError):
    default_reason = "Invalid address"


class TransferFailed(VaultError):
    default_reason = "Transfer failed"

from __future__ import annotations

import logging

from web3 import Web3

from ..constants import ZERO_ADDRESS
from ..errors import AuthorizationError, ZeroAddress
from ..events import OwnershipTransferred

logger = logging.getLogger(__name__)


def normalize_address(address: str | None) -> str:
    """Checksum ``address``, raising ZeroAddress for empty, malformed or zero input."""
    if not address or not Web3.is_address(address):
        raise ZeroAddress(f"Invalid address: {address!r}")
    checksum = Web3.to_checksum_address(address)
    if checksum == ZERO_ADDRESS:
        raise ZeroAddress("Zero address is not allowed")
    return checksum


def is_zero_address(address: str | None) -> bool:
    return not address or address.lower() == ZERO_ADDRESS


class AccessGuard:
    """Single-principal gate in front of every owner-only operation."""

    def __init__(self, principal: str | None):
        self._principal = Web3.to_checksum_address(principal) if principal else None

    @property
    def principal(self) -> str | None:
        return self._principal

    def is_principal(self, caller: str | None) -> bool:
        if self._principal is None or not caller or not Web3.is_address(caller):
            return False
        return Web3.to_checksum_address(caller) == self._principal

    def require(self, caller: str | None) -> None:
        if not self.is_principal(caller):
            logger.warning("Rejected call from %s (principal is %s)", caller, self._principal)
            raise AuthorizationError()

    def transfer_ownership(self, caller: str, new_principal: str) -> OwnershipTransferred:
        """Hand the vault to ``new_principal`` immediately; there is no accept step."""
        self.require(caller)
        new_checksum = normalize_address(new_principal)
        previous = self._principal or ZERO_ADDRESS
        self._principal = new_checksum
        logger.info("Ownership transferred from %s to %s", previous, new_checksum)
        return OwnershipTransferred(
            previous_principal=previous, new_principal=new_checksum
        )

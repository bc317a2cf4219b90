"""Application state container."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .engine.vault import Vault
from .settings import VaultSettings


@dataclass
class AppState:
    """Container for CLI-wide settings and dependencies.

    Passed from the Typer callback to each command to avoid global state.
    The vault is built lazily because ``--show-config`` must work without
    an RPC connection.
    """

    settings: VaultSettings
    logger: logging.Logger
    _vault: Vault | None = field(default=None, repr=False)

    @property
    def vault(self) -> Vault:
        if self._vault is None:
            from .bootstrap import build_vault

            self._vault = build_vault(self.settings)
        return self._vault

"""Persistence for the vault's own configuration state.

Balances are never stored: the token contracts are the source of truth.
Only what the vault itself owns is kept here (principal, dividend schedule,
last informational quote) so a fresh CLI process picks up where the last
one stopped.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class VaultState(BaseModel):
    principal: str | None = None
    next_dividend_time: int = 0
    last_market_quote: int | None = None

    model_config = ConfigDict(extra="ignore")


class VaultStateStore:
    """JSON file store with atomic replace-on-write."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> VaultState | None:
        """Return the stored state, or None when no state file exists yet."""
        if not self.path.exists():
            logger.info("No vault state file at %s", self.path)
            return None
        state = VaultState.model_validate_json(self.path.read_text(encoding="utf-8"))
        logger.debug("Loaded vault state from %s: %s", self.path, state)
        return state

    def save(self, state: VaultState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), suffix=".tmp", prefix="vault_state_"
        )
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
                f.write(state.model_dump_json(indent=2))
            os.replace(tmp_path, self.path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
        logger.debug("Saved vault state to %s", self.path)

"""
PuffQuest - game/store.py
Player store: accounts keyed by wallet plus the current GlobalStats.
===================================================================
Version:     0.2
Stack:       Python 3.12 | tomllib

Snapshots are plain TOML, one [[players]] table per account and a single
[global_stats] table. Writing is line by line; reading goes through
tomllib.
"""

from __future__ import annotations

import json
import logging
import tomllib
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from economy.models import DEVICE_KINDS, DeviceLevels, GlobalStats
from game.accounts import PlayerAccount

logger = logging.getLogger(__name__)

_FLOAT_FIELDS = ("balance", "total_earned", "total_spent", "total_claimed", "passive_accumulated")


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        return json.dumps(value)
    return str(value)


class PlayerStore:
    def __init__(self, stats: Optional[GlobalStats] = None) -> None:
        self._accounts: Dict[str, PlayerAccount] = {}
        self.stats = stats if stats is not None else GlobalStats()

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, wallet: str) -> bool:
        return wallet in self._accounts

    def get(self, wallet: str) -> PlayerAccount:
        return self._accounts[wallet]

    def add(self, account: PlayerAccount) -> PlayerAccount:
        if account.wallet in self._accounts:
            raise ValueError(f"Account already exists: {account.wallet}")
        self._accounts[account.wallet] = account
        return account

    def get_or_create(self, wallet: str) -> PlayerAccount:
        """New wallets start with every device at level 0."""
        if wallet not in self._accounts:
            logger.info("Creating account for %s", wallet)
            self._accounts[wallet] = PlayerAccount(wallet=wallet)
        return self._accounts[wallet]

    def accounts(self) -> Iterator[PlayerAccount]:
        return iter(list(self._accounts.values()))

    def passive_eligible(self) -> List[PlayerAccount]:
        return [a for a in self._accounts.values() if a.passive_eligible]

    # ----------------------------------------------------------
    # Snapshot
    # ----------------------------------------------------------

    def save(self, snapshot_path: Path) -> None:
        snapshot_path = Path(snapshot_path)
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)

        lines = []
        lines.append("[global_stats]")
        lines.append(f"total_players = {self.stats.total_players}")
        lines.append(f"rewards_pool_remaining = {_toml_value(float(self.stats.rewards_pool_remaining))}")
        lines.append(f"circulating_supply = {_toml_value(float(self.stats.circulating_supply))}")
        lines.append("")

        for account in self._accounts.values():
            lines.append("[[players]]")
            lines.append(f"wallet = {_toml_value(account.wallet)}")
            for kind in DEVICE_KINDS:
                lines.append(f"{kind} = {account.levels.level_of(kind)}")
            for name in _FLOAT_FIELDS:
                lines.append(f"{name} = {_toml_value(float(getattr(account, name)))}")
            lines.append(f"total_puffs = {account.total_puffs}")
            lines.append(f"streak_days = {account.streak_days}")
            # TOML has no null; absent keys mean None
            if account.last_passive_claim is not None:
                lines.append(f"last_passive_claim = {_toml_value(account.last_passive_claim)}")
            if account.last_active_date is not None:
                lines.append(f"last_active_date = {_toml_value(account.last_active_date)}")
            lines.append("")

        with open(snapshot_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))
        logger.info("Saved %d accounts to %s", len(self._accounts), snapshot_path)

    @classmethod
    def load(cls, snapshot_path: Path) -> "PlayerStore":
        snapshot_path = Path(snapshot_path)
        if not snapshot_path.exists():
            raise FileNotFoundError(f"Player snapshot not found: {snapshot_path}")

        with open(snapshot_path, "rb") as f:
            data = tomllib.load(f)

        store = cls(stats=GlobalStats(**data.get("global_stats", {})))
        for pdata in data.get("players", []):
            levels = DeviceLevels(**{k: pdata.get(k, 0) for k in DEVICE_KINDS})
            account = PlayerAccount(
                wallet=pdata["wallet"],
                levels=levels,
                total_puffs=pdata.get("total_puffs", 0),
                streak_days=pdata.get("streak_days", 0),
                last_passive_claim=pdata.get("last_passive_claim"),
                last_active_date=pdata.get("last_active_date"),
                **{name: float(pdata.get(name, 0.0)) for name in _FLOAT_FIELDS},
            )
            store.add(account)
        logger.info("Loaded %d accounts from %s", len(store), snapshot_path)
        return store

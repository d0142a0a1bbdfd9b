"""
PuffQuest - game/ledger.py
Transaction Ledger: append-only journal of every balance movement.
==================================================================
Version:     0.2
Stack:       Python 3.12 | stdlib json | bespoke EventBus
Status:      Production-ready. No balance logic here.

Architecture notes
------------------
- The ledger is a PASSIVE wildcard subscriber. It never emits events.
- Append-only JSONL. Written entries are immutable. Corrections are
  new entries.
- Wall time is injected via `clock` at construction so tests can pin it.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List

from game.events import (
    EVT_DEVICE_PURCHASED,
    EVT_DEVICE_UPGRADED,
    EVT_PASSIVE_AWARDED,
    EVT_PUFF_REWARDED,
    EVT_SESSION_CLOSED,
    EVT_SESSION_OPENED,
    EVT_STATS_UPDATED,
    EVT_TOKENS_CLAIMED,
    WILDCARD,
    EconomyEvent,
    EventBus,
)

logger = logging.getLogger(__name__)

_TRANSACTION_TYPES: Dict[str, str] = {
    EVT_PUFF_REWARDED:   "earn_puff",
    EVT_PASSIVE_AWARDED: "earn_passive",
    EVT_TOKENS_CLAIMED:  "claim",
    EVT_STATS_UPDATED:   "stats_updated",
    EVT_SESSION_OPENED:  "session_opened",
    EVT_SESSION_CLOSED:  "session_closed",
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def transaction_type(event: EconomyEvent) -> str:
    if event.event_key == EVT_DEVICE_PURCHASED:
        return f"purchase_{event.data.get('device_type', 'unknown')}"
    if event.event_key == EVT_DEVICE_UPGRADED:
        return f"upgrade_{event.data.get('device_type', 'unknown')}"
    return _TRANSACTION_TYPES.get(event.event_key, event.event_key)


def describe(event: EconomyEvent) -> str:
    key = event.event_key
    data = event.data
    if key == EVT_PUFF_REWARDED:
        return f"Puff reward: {event.amount:g}"
    if key == EVT_PASSIVE_AWARDED:
        return f"Passive income: {event.amount:g}"
    if key == EVT_DEVICE_PURCHASED:
        return f"Purchased {data.get('device_type')}"
    if key == EVT_DEVICE_UPGRADED:
        return f"Upgraded {data.get('device_type')} to level {data.get('new_level')}"
    if key == EVT_TOKENS_CLAIMED:
        return f"Claimed {-event.amount:g}"
    return key


@dataclass(frozen=True)
class LedgerEntry:
    transaction_id: str
    recorded_at: str
    wallet: str
    transaction_type: str
    amount: float
    balance_before: Any
    balance_after: Any
    description: str
    metadata: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_id":   self.transaction_id,
            "recorded_at":      self.recorded_at,
            "wallet":           self.wallet,
            "transaction_type": self.transaction_type,
            "amount":           self.amount,
            "balance_before":   self.balance_before,
            "balance_after":    self.balance_after,
            "description":      self.description,
            "metadata":         self.metadata,
        }


class TransactionLedger:
    """
    Usage:
        bus = EventBus()
        ledger = TransactionLedger(bus, Path("sessions/ledger.jsonl"))
        account.upgrade_device("vape", bus)   # -> one upgrade_vape line
    """

    def __init__(
        self,
        bus: EventBus,
        ledger_path: Path,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.bus = bus
        self.ledger_path = Path(ledger_path)
        self.clock = clock

        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)
        bus.subscribe(WILDCARD, self._on_event)

    def _on_event(self, event: EconomyEvent) -> None:
        self.record(event)

    def record(self, event: EconomyEvent) -> LedgerEntry:
        metadata = {
            k: v for k, v in event.data.items()
            if k not in ("balance_before", "balance_after")
        }
        entry = LedgerEntry(
            transaction_id=str(uuid.uuid4()),
            recorded_at=self.clock().isoformat(),
            wallet=event.wallet,
            transaction_type=transaction_type(event),
            amount=event.amount,
            balance_before=event.data.get("balance_before"),
            balance_after=event.data.get("balance_after"),
            description=describe(event),
            metadata=metadata,
        )
        self._append_jsonl(entry)
        logger.debug("Ledger %s %s %g", entry.wallet, entry.transaction_type, entry.amount)
        return entry

    def _append_jsonl(self, entry: LedgerEntry) -> None:
        with open(self.ledger_path, "a", encoding="utf-8") as fh:
            fh.write(json.dumps(entry.to_dict(), ensure_ascii=False, default=str) + "\n")


class LedgerReader:
    """Read-only query interface for a ledger.jsonl file."""

    def __init__(self, ledger_path: Path) -> None:
        self.ledger_path = Path(ledger_path)

    def all_entries(self) -> List[Dict[str, Any]]:
        if not self.ledger_path.exists():
            return []
        entries = []
        with open(self.ledger_path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if line:
                    entries.append(json.loads(line))
        return entries

    def by_wallet(self, wallet: str) -> List[Dict[str, Any]]:
        return [e for e in self.all_entries() if e.get("wallet") == wallet]

    def by_type(self, tx_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.all_entries() if e.get("transaction_type") == tx_type]

    def total_for(self, wallet: str, tx_type: str) -> float:
        return sum(
            e.get("amount", 0.0) for e in self.by_wallet(wallet)
            if e.get("transaction_type") == tx_type
        )

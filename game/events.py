"""
PuffQuest - game/events.py
Economy event bus: typed events, canonical keys, pub-sub.
=========================================================
Version:     0.2
Stack:       Python 3.12 | Pydantic v2 | bespoke pub-sub
Status:      Production-ready.

Architecture notes
------------------
- All events are EconomyEvent (BaseModel). data stays flat + JSON-safe.
- Account, session and job code emit; the ledger listens on "*".
- A failing handler never stops emission. The failure is logged.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# ============================================================
# CANONICAL EVENT KEYS
# Never use raw strings. Add new keys here only.
# ============================================================

EVT_PUFF_REWARDED         = "economy.puff_rewarded"
EVT_PASSIVE_AWARDED       = "economy.passive_awarded"
EVT_DEVICE_PURCHASED      = "economy.device_purchased"
EVT_DEVICE_UPGRADED       = "economy.device_upgraded"
EVT_TOKENS_CLAIMED        = "economy.tokens_claimed"
EVT_STATS_UPDATED         = "economy.stats_updated"
EVT_SESSION_OPENED        = "session.opened"
EVT_SESSION_CLOSED        = "session.closed"

WILDCARD = "*"


class EconomyEvent(BaseModel):
    """Base envelope. The ledger receives these directly."""
    event_key: str
    wallet: str
    amount: float = 0.0
    data: Dict[str, Any] = Field(default_factory=dict)


HandlerFn = Callable[[EconomyEvent], None]


class EventBus:
    """
    Pass instance at construction - no global singleton.

    Wildcard key "*" receives every emitted event (used by the ledger).
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[HandlerFn]] = {}

    def subscribe(self, event_key: str, handler: HandlerFn) -> None:
        self._subscribers.setdefault(event_key, []).append(handler)

    def unsubscribe(self, event_key: str, handler: HandlerFn) -> None:
        if event_key in self._subscribers:
            self._subscribers[event_key] = [
                h for h in self._subscribers[event_key] if h is not handler
            ]

    def emit(self, event: EconomyEvent) -> None:
        targets = (
            self._subscribers.get(event.event_key, [])
            + self._subscribers.get(WILDCARD, [])
        )
        for handler in targets:
            try:
                handler(event)
            except Exception:  # noqa: BLE001
                logger.exception("Handler error on '%s'", event.event_key)


def emit(bus: Optional[EventBus], event_key: str, wallet: str, amount: float = 0.0, **data: Any) -> None:
    """Emit on `bus` if there is one. Accounts work without a bus in tests."""
    if bus is None:
        return
    bus.emit(EconomyEvent(event_key=event_key, wallet=wallet, amount=amount, data=data))

"""
PuffQuest - jobs/passive_income.py
Hourly passive-income batch: the server-side path into the engine.
=================================================================
Version:     0.2
Stack:       Python 3.12 | economy engine | stdlib logging

Runs once per hour over every account with a level 2+ device. The amount
comes from economy.engine.compute_passive_income, the same function the
client uses for its accrual preview. A rejected account is logged and
skipped; the run continues with the next player.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from economy.engine import PASSIVE_HOURS_CAP, compute_passive_income
from economy.models import GlobalStats
from game.accounts import EconomyError, PlayerAccount
from game.events import EVT_PASSIVE_AWARDED, EventBus
from game.store import PlayerStore

logger = logging.getLogger(__name__)

MIN_HOURS_BETWEEN_CLAIMS: float = 1.0
DEFAULT_BACKFILL_HOURS: float = 24.0


@dataclass(frozen=True)
class PassiveRunReport:
    users_processed: int
    users_failed: int
    total_awarded: int
    timestamp: datetime


def hours_since_claim(account: PlayerAccount, now: datetime, backfill_hours: float) -> float:
    if account.last_passive_claim is None:
        return backfill_hours
    return (now - account.last_passive_claim).total_seconds() / 3600


def award_passive_income(
    account: PlayerAccount,
    stats: GlobalStats,
    now: datetime,
    min_hours: float = MIN_HOURS_BETWEEN_CLAIMS,
    backfill_hours: float = DEFAULT_BACKFILL_HOURS,
    bus: Optional[EventBus] = None,
) -> int:
    """Credit one account. Returns the amount awarded (0 when skipped)."""
    hours = hours_since_claim(account, now, backfill_hours)
    if hours < min_hours:
        return 0

    amount = compute_passive_income(account.levels, stats, hours)
    if amount <= 0:
        return 0

    account.credit(
        amount, bus, EVT_PASSIVE_AWARDED,
        hours_claimed=min(hours, PASSIVE_HOURS_CAP),
        device_levels=account.levels.model_dump(),
    )
    account.last_passive_claim = now
    account.passive_accumulated = amount
    return amount


def run_passive_income(
    store: PlayerStore,
    now: datetime,
    stats: Optional[GlobalStats] = None,
    min_hours: float = MIN_HOURS_BETWEEN_CLAIMS,
    backfill_hours: float = DEFAULT_BACKFILL_HOURS,
    bus: Optional[EventBus] = None,
) -> PassiveRunReport:
    stats = stats if stats is not None else store.stats
    eligible = store.passive_eligible()
    logger.info("Starting passive income run: %d eligible accounts", len(eligible))

    processed = 0
    failed = 0
    total = 0
    for account in eligible:
        try:
            amount = award_passive_income(account, stats, now, min_hours, backfill_hours, bus)
        except EconomyError:
            logger.exception("Passive income failed for %s", account.wallet)
            failed += 1
            continue
        if amount > 0:
            processed += 1
            total += amount
            logger.debug("Awarded %d passive to %s", amount, account.wallet)

    logger.info(
        "Passive income run complete. Processed %d users, awarded %d total",
        processed, total,
    )
    return PassiveRunReport(
        users_processed=processed,
        users_failed=failed,
        total_awarded=total,
        timestamp=now,
    )

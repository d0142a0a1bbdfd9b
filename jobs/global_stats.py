"""
PuffQuest - jobs/global_stats.py
Global stats aggregation: rebuild the shared economy snapshot.
==============================================================
Stack:       Python 3.12 | Pydantic v2 models

Players are accounts with at least one puff. The rewards pool is the
initial pool minus everything ever credited, clamped at zero.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from economy.models import INITIAL_POOL, GlobalStats
from game.accounts import PlayerAccount
from game.events import EVT_STATS_UPDATED, EventBus, emit
from game.store import PlayerStore

logger = logging.getLogger(__name__)


def aggregate_global_stats(
    accounts: Iterable[PlayerAccount],
    initial_pool: float = INITIAL_POOL,
) -> GlobalStats:
    total_players = 0
    distributed = 0.0
    circulating = 0.0
    for account in accounts:
        if account.total_puffs > 0:
            total_players += 1
        distributed += account.total_earned
        circulating += account.balance + account.total_claimed

    return GlobalStats(
        total_players=total_players,
        rewards_pool_remaining=max(0.0, min(initial_pool, initial_pool - distributed)),
        circulating_supply=circulating,
    )


def update_global_stats(store: PlayerStore, bus: Optional[EventBus] = None) -> GlobalStats:
    stats = aggregate_global_stats(store.accounts())
    store.stats = stats
    emit(bus, EVT_STATS_UPDATED, "system", 0.0, **stats.model_dump())
    logger.info(
        "Global stats updated: players=%d pool_remaining=%.2f circulating=%.2f",
        stats.total_players, stats.rewards_pool_remaining, stats.circulating_supply,
    )
    return stats

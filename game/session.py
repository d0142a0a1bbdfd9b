"""
PuffQuest - game/session.py
Interactive puff session: the per-player client path into the engine.
=====================================================================
Version:     0.2
Stack:       Python 3.12 | economy engine | bespoke EventBus

Each detected puff is priced by economy.engine.compute_action_reward with
the player's current levels, the latest GlobalStats snapshot, the camera
flag and the player's real streak. Time is injected; the session never
reads the system clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from economy.engine import compute_action_reward
from economy.models import GlobalStats
from game.accounts import PlayerAccount
from game.events import (
    EVT_PUFF_REWARDED,
    EVT_SESSION_CLOSED,
    EVT_SESSION_OPENED,
    EventBus,
    emit,
)

logger = logging.getLogger(__name__)


class SessionStateError(RuntimeError):
    pass


@dataclass(frozen=True)
class SessionSummary:
    wallet: str
    puffs: int
    earned: int
    duration_seconds: float
    streak_days: int


class PuffSession:
    def __init__(
        self,
        account: PlayerAccount,
        stats: GlobalStats,
        bus: Optional[EventBus] = None,
        camera_active: bool = True,
    ) -> None:
        self.account = account
        self.stats = stats
        self.bus = bus
        self.camera_active = camera_active

        self.opened_at: Optional[datetime] = None
        self.puffs = 0
        self.earned = 0

    @property
    def is_open(self) -> bool:
        return self.opened_at is not None

    def open(self, now: datetime) -> None:
        if self.is_open:
            raise SessionStateError("Session already open")
        self.opened_at = now
        self.puffs = 0
        self.earned = 0
        streak = self.account.register_activity(now.date())
        emit(self.bus, EVT_SESSION_OPENED, self.account.wallet, 0.0,
             opened_at=now.isoformat(), streak_days=streak)
        logger.info("Session opened for %s (streak %d)", self.account.wallet, streak)

    def set_camera_active(self, active: bool) -> None:
        self.camera_active = active

    def update_stats(self, stats: GlobalStats) -> None:
        """Swap in a fresh global snapshot; later puffs price against it."""
        self.stats = stats

    def record_puff(self, now: datetime) -> int:
        """Award one detected puff. Returns the points granted."""
        if not self.is_open:
            raise SessionStateError("No open session")

        reward = compute_action_reward(
            self.account.levels,
            self.stats,
            is_active_session=self.camera_active,
            streak_days=self.account.streak_days,
        )
        self.account.total_puffs += 1
        self.account.credit(
            reward, self.bus, EVT_PUFF_REWARDED,
            at=now.isoformat(), camera_active=self.camera_active,
            device_levels=self.account.levels.model_dump(),
        )
        self.puffs += 1
        self.earned += reward
        logger.debug("Puff by %s rewarded %d", self.account.wallet, reward)
        return reward

    def close(self, now: datetime) -> SessionSummary:
        if not self.is_open:
            raise SessionStateError("No open session")
        summary = SessionSummary(
            wallet=self.account.wallet,
            puffs=self.puffs,
            earned=self.earned,
            duration_seconds=(now - self.opened_at).total_seconds(),
            streak_days=self.account.streak_days,
        )
        emit(self.bus, EVT_SESSION_CLOSED, self.account.wallet, float(self.earned),
             puffs=self.puffs, duration_seconds=summary.duration_seconds)
        logger.info("Session closed for %s: %d puffs, %d points",
                    self.account.wallet, self.puffs, self.earned)
        self.opened_at = None
        return summary

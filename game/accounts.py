"""
PuffQuest - game/accounts.py
Player accounts: balances, device ownership, upgrades, streaks.
===============================================================
Version:     0.2
Stack:       Python 3.12 | dataclasses | economy engine
Status:      Production-ready.

Architecture notes
------------------
- PlayerAccount.balance is NEVER mutated directly by callers. Use
  credit() / claim() / upgrade_device().
- Upgrade pricing comes from economy.engine.get_upgrade_cost only.
- Every balance change emits an event when a bus is supplied; the
  ledger turns those into transaction records.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Optional

from economy.engine import get_upgrade_cost
from economy.models import DEVICE_KINDS, MAX_DEVICE_LEVEL, DeviceLevels
from game.events import (
    EVT_DEVICE_PURCHASED,
    EVT_DEVICE_UPGRADED,
    EVT_TOKENS_CLAIMED,
    EventBus,
    emit,
)


# ============================================================
# ERRORS
# ============================================================

class EconomyError(ValueError):
    """Base for rejected account operations."""


class UnknownDeviceError(EconomyError):
    pass


class DeviceNotOwnedError(EconomyError):
    pass


class DeviceAlreadyOwnedError(EconomyError):
    pass


class MaxLevelError(EconomyError):
    pass


class InsufficientBalanceError(EconomyError):
    pass


class InvalidAmountError(EconomyError):
    pass


def _check_kind(kind: str) -> None:
    if kind not in DEVICE_KINDS:
        raise UnknownDeviceError(f"Invalid device type: {kind}")


# ============================================================
# ACCOUNT
# ============================================================

@dataclass
class PlayerAccount:
    wallet: str
    levels: DeviceLevels = field(default_factory=DeviceLevels)
    balance: float = 0.0
    total_earned: float = 0.0
    total_spent: float = 0.0
    total_claimed: float = 0.0
    total_puffs: int = 0
    last_passive_claim: Optional[datetime] = None
    passive_accumulated: float = 0.0
    streak_days: int = 0
    last_active_date: Optional[date] = None

    @property
    def passive_eligible(self) -> bool:
        return self.levels.passive_eligible

    def credit(self, amount: float, bus: Optional[EventBus] = None, event_key: Optional[str] = None, **data) -> float:
        """Add earned points. Returns the new balance."""
        if amount < 0:
            raise InvalidAmountError(f"Cannot credit a negative amount: {amount}")
        balance_before = self.balance
        self.balance += amount
        self.total_earned += amount
        if event_key is not None:
            emit(bus, event_key, self.wallet, amount,
                 balance_before=balance_before, balance_after=self.balance, **data)
        return self.balance

    def purchase_device(self, kind: str, bus: Optional[EventBus] = None) -> DeviceLevels:
        """
        Record a completed one-time device purchase (level 0 -> 1).
        Payment happens on-chain, outside this account.
        """
        _check_kind(kind)
        if self.levels.level_of(kind) > 0:
            raise DeviceAlreadyOwnedError(f"{kind} already owned")
        self.levels = self.levels.with_level(kind, 1)
        emit(bus, EVT_DEVICE_PURCHASED, self.wallet, 0.0, device_type=kind, new_level=1)
        return self.levels

    def upgrade_device(self, kind: str, bus: Optional[EventBus] = None) -> int:
        """Spend balance to raise a device one level. Returns the cost paid."""
        _check_kind(kind)
        current = self.levels.level_of(kind)
        if current == 0:
            raise DeviceNotOwnedError("Device not owned. Purchase it first.")
        if current >= MAX_DEVICE_LEVEL:
            raise MaxLevelError("Device already at max level")

        cost = get_upgrade_cost(current)
        if self.balance < cost:
            raise InsufficientBalanceError(
                f"Insufficient balance. Need {cost}, have {self.balance:.4f}"
            )

        balance_before = self.balance
        self.balance -= cost
        self.total_spent += cost
        self.levels = self.levels.with_level(kind, current + 1)
        emit(bus, EVT_DEVICE_UPGRADED, self.wallet, -cost,
             device_type=kind, previous_level=current, new_level=current + 1,
             balance_before=balance_before, balance_after=self.balance)
        return cost

    def claim(self, amount: float, bus: Optional[EventBus] = None) -> float:
        """
        Move points out of the off-chain balance for an on-chain claim.
        The transfer itself belongs to the relay. Returns the new balance.
        """
        if amount <= 0:
            raise InvalidAmountError(f"Invalid claim amount: {amount}")
        if amount > self.balance:
            raise InsufficientBalanceError(
                f"Insufficient balance. Need {amount}, have {self.balance:.4f}"
            )
        balance_before = self.balance
        self.balance -= amount
        self.total_claimed += amount
        emit(bus, EVT_TOKENS_CLAIMED, self.wallet, -amount,
             balance_before=balance_before, balance_after=self.balance)
        return self.balance

    def register_activity(self, today: date) -> int:
        """
        Streak bookkeeping for a day with play. Same day keeps the streak,
        the next day extends it, any gap restarts at 1.
        """
        if self.last_active_date == today:
            return self.streak_days
        if self.last_active_date is not None and today - self.last_active_date == timedelta(days=1):
            self.streak_days += 1
        else:
            self.streak_days = 1
        self.last_active_date = today
        return self.streak_days

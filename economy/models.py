"""
PuffQuest - economy/models.py
Economy value types: device levels, global stats snapshot, projections.
=======================================================================
Version:     0.2  (Phase 1B - shared engine)
Stack:       Python 3.12 | Pydantic v2
Status:      Production-ready.

All models are frozen. The engine only ever reads them; upgrades and stat
refreshes build new instances.

Validation happens here, at construction. The engine trusts whatever it
is handed; model_construct() skips the checks for callers that already
hold clean data.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

INITIAL_POOL: float = 45_000_000.0
MAX_DEVICE_LEVEL: int = 10

# Canonical device kinds, in coefficient order.
DEVICE_KINDS = ("vape", "cigarette", "cigar")


class DeviceLevels(BaseModel):
    model_config = ConfigDict(frozen=True)

    vape: int = Field(default=0, ge=0, le=MAX_DEVICE_LEVEL)
    cigarette: int = Field(default=0, ge=0, le=MAX_DEVICE_LEVEL)
    cigar: int = Field(default=0, ge=0, le=MAX_DEVICE_LEVEL)

    def level_of(self, kind: str) -> int:
        if kind not in DEVICE_KINDS:
            raise KeyError(f"Unknown device kind: {kind}")
        return getattr(self, kind)

    def with_level(self, kind: str, level: int) -> "DeviceLevels":
        """Return a copy with one device set to `level` (validated)."""
        if kind not in DEVICE_KINDS:
            raise KeyError(f"Unknown device kind: {kind}")
        data = self.model_dump()
        data[kind] = level
        return DeviceLevels(**data)

    @property
    def passive_eligible(self) -> bool:
        return any(getattr(self, k) >= 2 for k in DEVICE_KINDS)


class GlobalStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_players: int = Field(default=0, ge=0)
    rewards_pool_remaining: float = Field(default=INITIAL_POOL, ge=0.0)
    circulating_supply: float = Field(default=0.0, ge=0.0)

    @model_validator(mode="after")
    def _pool_within_initial(self) -> "GlobalStats":
        if self.rewards_pool_remaining > INITIAL_POOL:
            raise ValueError(
                f"rewards_pool_remaining {self.rewards_pool_remaining} exceeds initial pool {INITIAL_POOL}"
            )
        return self

    @property
    def pool_depletion(self) -> float:
        return 1 - (self.rewards_pool_remaining / INITIAL_POOL)


class DailyEarnings(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_actions: int
    from_passive: int
    total: int
    conversion_rate: int         # points per token at this snapshot
    tokens_earned: float


class BreakevenProjection(BaseModel):
    model_config = ConfigDict(frozen=True)

    can_breakeven: bool
    days_to_breakeven: Optional[int]   # None: unreachable at current earnings
    daily_earnings: float


class DeviceStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    level: int
    reward_per_puff: int
    passive_per_hour: int
    upgrade_cost: Optional[int]        # None at max level

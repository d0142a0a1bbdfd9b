"""
PuffQuest - economy/engine.py
Economy Engine: puff rewards, passive accrual, upgrade pricing, projections.
============================================================================
Version:     0.3  (Phase 1B - single shared engine)
Stack:       Python 3.12 | Pydantic v2 models (economy/models.py)
Status:      Production-ready. No I/O, no clock, no logging here.

Architecture notes
------------------
- Every function is pure. Same inputs, same output, on the client session
  path (game/session.py) and the hourly batch path (jobs/passive_income.py).
  Neither path may carry its own copy of this arithmetic.
- GlobalStats is a snapshot passed in by the caller. Nothing here reads or
  caches global state.
- Inputs are trusted. DeviceLevels / GlobalStats validate at construction;
  a model_construct()'d value outside the domain yields a defined number,
  never an exception.
- Rounding is floor at the end of each reward computation, after all
  multipliers. Intermediate products stay float.

Deflation schedule
------------------
  players <  50   action x1.2 (early adopters)   passive x1.0
  players <  100  action x1.0                    passive x1.0
  players >= 100  action max(0.1, 1 - 0.8*depletion - 0.001*(players-100))
                  passive max(0.2, 1 - 0.002*(players-100))

Design Variables (change here only - both runtime paths read these)
-------------------------------------------------------------------
  BASE_ACTION_REWARD        20
  ACTION_COEFFICIENTS       vape 5 | cigarette 8 | cigar 12
  PASSIVE_COEFFICIENTS      vape 10 | cigarette 15 | cigar 25  (per hour per level above 1)
  ACTIVE_SESSION_MULTIPLIER 2.5
  PASSIVE_HOURS_CAP         24
  UPGRADE_BASE_COST         1 (x3 per level from level 2)
  ACQUISITION_COST          0.05 (one-time device purchase, cost units)
"""

from __future__ import annotations

import math
from typing import Dict, List

from economy.models import (
    DEVICE_KINDS,
    MAX_DEVICE_LEVEL,
    BreakevenProjection,
    DailyEarnings,
    DeviceLevels,
    DeviceStats,
    GlobalStats,
)

# ============================================================
# DESIGN VARIABLE DEFAULTS
# ============================================================

BASE_ACTION_REWARD: int = 20
ACTION_COEFFICIENTS: Dict[str, int] = {"vape": 5, "cigarette": 8, "cigar": 12}
PASSIVE_COEFFICIENTS: Dict[str, int] = {"vape": 10, "cigarette": 15, "cigar": 25}

EARLY_ADOPTER_PLAYERS: int = 50
DEFLATION_PLAYERS: int = 100
EARLY_ADOPTER_FACTOR: float = 1.2
ACTION_DEFLATION_FLOOR: float = 0.1
ACTION_POOL_WEIGHT: float = 0.8
ACTION_PLAYER_WEIGHT: float = 0.001
PASSIVE_DEFLATION_FLOOR: float = 0.2
PASSIVE_PLAYER_WEIGHT: float = 0.002

ACTIVE_SESSION_MULTIPLIER: float = 2.5
MIN_ACTION_REWARD: int = 1
PASSIVE_HOURS_CAP: float = 24.0
PASSIVE_MIN_LEVEL: int = 2

UPGRADE_BASE_COST: int = 1
UPGRADE_GROWTH: int = 3

# (minimum streak days, multiplier), highest first
STREAK_TIERS = ((30, 2.0), (14, 1.5), (7, 1.25), (3, 1.1))

# Usage model behind the daily projection
ACTIONS_PER_DAY: int = 30
ACTIVE_SESSION_RATIO: float = 0.5

ACQUISITION_COST: float = 0.05
DEFAULT_EXCHANGE_RATE: float = 0.01
BREAKEVEN_TARGET_DAYS: int = 3

# Points -> token conversion
BASE_CONVERSION_RATE: int = 10_000
MAX_CONVERSION_RATE: int = 1_000_000


# ============================================================
# DEFLATION
# ============================================================

def get_action_deflation_factor(stats: GlobalStats) -> float:
    players = stats.total_players
    if players < EARLY_ADOPTER_PLAYERS:
        return EARLY_ADOPTER_FACTOR
    if players < DEFLATION_PLAYERS:
        return 1.0
    pool_depletion = stats.pool_depletion
    return max(
        ACTION_DEFLATION_FLOOR,
        1 - (pool_depletion * ACTION_POOL_WEIGHT) - ((players - DEFLATION_PLAYERS) * ACTION_PLAYER_WEIGHT),
    )


def get_passive_deflation_factor(stats: GlobalStats) -> float:
    players = stats.total_players
    if players < DEFLATION_PLAYERS:
        return 1.0
    return max(PASSIVE_DEFLATION_FLOOR, 1 - ((players - DEFLATION_PLAYERS) * PASSIVE_PLAYER_WEIGHT))


def get_streak_multiplier(streak_days: int) -> float:
    """
    Daily-streak bonus:
      0-2 days  1.0x | 3-6  1.1x | 7-13  1.25x | 14-29  1.5x | 30+  2.0x
    """
    for min_days, multiplier in STREAK_TIERS:
        if streak_days >= min_days:
            return multiplier
    return 1.0


# ============================================================
# REWARDS
# ============================================================

def get_base_action_reward(levels: DeviceLevels) -> int:
    return BASE_ACTION_REWARD + sum(
        getattr(levels, kind) * ACTION_COEFFICIENTS[kind] for kind in DEVICE_KINDS
    )


def compute_action_reward(
    levels: DeviceLevels,
    stats: GlobalStats,
    is_active_session: bool = False,
    streak_days: int = 1,
) -> int:
    """
    Points for a single detected puff.

    floor(base * deflation * session * streak), never below 1.
    streak_days defaults to 1 (no bonus); session handlers pass the
    player's real streak.
    """
    base = get_base_action_reward(levels)
    deflation = get_action_deflation_factor(stats)
    session_multiplier = ACTIVE_SESSION_MULTIPLIER if is_active_session else 1.0
    streak_multiplier = get_streak_multiplier(streak_days)

    reward = math.floor(base * deflation * session_multiplier * streak_multiplier)
    return max(MIN_ACTION_REWARD, reward)


def get_passive_hourly_rate(levels: DeviceLevels) -> int:
    """Undeflated points per hour. Only devices at level 2+ contribute."""
    hourly = 0
    for kind in DEVICE_KINDS:
        level = getattr(levels, kind)
        if level >= PASSIVE_MIN_LEVEL:
            hourly += (level - 1) * PASSIVE_COEFFICIENTS[kind]
    return hourly


def compute_passive_income(
    levels: DeviceLevels,
    stats: GlobalStats,
    hours_since_last_claim: float,
) -> int:
    """
    Passive accrual since the last claim. At most PASSIVE_HOURS_CAP hours
    accrue per claim; anything older is forfeited.
    """
    effective_hours = min(hours_since_last_claim, PASSIVE_HOURS_CAP)
    hourly = get_passive_hourly_rate(levels)
    deflation = get_passive_deflation_factor(stats)
    return math.floor(hourly * effective_hours * deflation)


# ============================================================
# PRICING
# ============================================================

def get_upgrade_cost(current_level: int) -> int:
    """
    Cost to go from current_level to current_level + 1.

    Level 0 has no upgrade price: ownership comes from the one-time
    purchase. Level 1 -> 2 is free. From level 2 the cost triples.
    """
    if current_level <= 1:
        return 0
    return math.floor(UPGRADE_BASE_COST * UPGRADE_GROWTH ** (current_level - 1))


def get_points_to_token_rate(stats: GlobalStats) -> int:
    """
    Points required for one token.

    Under 50 players: 10k -> 20k. 50-99: 1x -> ~30x base. 100+: grows
    with pool depletion and (players/100)^2.5, capped at 1M.
    """
    players = stats.total_players
    if players < EARLY_ADOPTER_PLAYERS:
        return BASE_CONVERSION_RATE + (players * 200)
    if players < DEFLATION_PLAYERS:
        multiplier = 1 + ((players - EARLY_ADOPTER_PLAYERS) * 0.6)
        return math.floor(BASE_CONVERSION_RATE * multiplier)

    pool_depletion = stats.pool_depletion
    player_inflation = (players / DEFLATION_PLAYERS) ** 2.5
    deflation_multiplier = 1 + (pool_depletion * 20) + (player_inflation * 10)
    rate = math.floor(BASE_CONVERSION_RATE * deflation_multiplier)
    return min(rate, MAX_CONVERSION_RATE)


# ============================================================
# PROJECTIONS
# ============================================================

def estimate_daily_earnings(
    levels: DeviceLevels,
    stats: GlobalStats,
    streak_days: int = 1,
) -> DailyEarnings:
    """
    Projected points for one day of typical play: 30 puffs, half of them in
    an active camera session, plus a full 24h of passive accrual.
    """
    active_puffs = math.floor(ACTIONS_PER_DAY * ACTIVE_SESSION_RATIO)
    inactive_puffs = ACTIONS_PER_DAY - active_puffs

    from_actions = (
        active_puffs * compute_action_reward(levels, stats, True, streak_days)
        + inactive_puffs * compute_action_reward(levels, stats, False, streak_days)
    )
    from_passive = compute_passive_income(levels, stats, PASSIVE_HOURS_CAP)
    total = from_actions + from_passive

    conversion_rate = get_points_to_token_rate(stats)
    return DailyEarnings(
        from_actions=from_actions,
        from_passive=from_passive,
        total=total,
        conversion_rate=conversion_rate,
        tokens_earned=total / conversion_rate,
    )


def can_breakeven_in_n_days(
    levels: DeviceLevels,
    stats: GlobalStats,
    exchange_rate: float = DEFAULT_EXCHANGE_RATE,
    days: int = BREAKEVEN_TARGET_DAYS,
    streak_days: int = 1,
) -> BreakevenProjection:
    daily = estimate_daily_earnings(levels, stats, streak_days)

    if daily.total <= 0 or exchange_rate <= 0:
        return BreakevenProjection(
            can_breakeven=False,
            days_to_breakeven=None,
            daily_earnings=float(daily.total),
        )

    units_needed = ACQUISITION_COST / exchange_rate
    days_to_breakeven = math.ceil(units_needed / daily.total)
    return BreakevenProjection(
        can_breakeven=days_to_breakeven <= days,
        days_to_breakeven=days_to_breakeven,
        daily_earnings=float(daily.total),
    )


def describe_device(kind: str, level: int, stats: GlobalStats) -> DeviceStats:
    """One row of a device's upgrade table, with only that device owned."""
    if kind not in DEVICE_KINDS:
        raise KeyError(f"Unknown device kind: {kind}")
    levels = DeviceLevels().model_copy(update={kind: level})
    return DeviceStats(
        kind=kind,
        level=level,
        reward_per_puff=compute_action_reward(levels, stats, True),
        passive_per_hour=0 if level == 0 else compute_passive_income(levels, stats, 1),
        upgrade_cost=None if level >= MAX_DEVICE_LEVEL else get_upgrade_cost(level),
    )


def device_upgrade_path(kind: str, stats: GlobalStats) -> List[DeviceStats]:
    return [describe_device(kind, level, stats) for level in range(MAX_DEVICE_LEVEL + 1)]

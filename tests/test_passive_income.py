import pytest

from economy.engine import (
    compute_passive_income,
    get_passive_deflation_factor,
    get_passive_hourly_rate,
)
from economy.models import DeviceLevels, GlobalStats

EARLY = GlobalStats(total_players=10)


def test_level_one_devices_earn_nothing():
    levels = DeviceLevels(vape=1, cigarette=1, cigar=1)
    assert get_passive_hourly_rate(levels) == 0
    assert compute_passive_income(levels, EARLY, 24) == 0


def test_only_level_two_and_up_contribute():
    # vape 3 -> 2*10 = 20, cigarette 1 -> 0, cigar 2 -> 1*25 = 25
    levels = DeviceLevels(vape=3, cigarette=1, cigar=2)
    assert get_passive_hourly_rate(levels) == 45


def test_hourly_rate_all_kinds():
    # vape 3 -> 20, cigarette 2 -> 15, cigar 4 -> 75
    levels = DeviceLevels(vape=3, cigarette=2, cigar=4)
    assert get_passive_hourly_rate(levels) == 110
    assert compute_passive_income(levels, EARLY, 5) == 550


def test_twenty_four_hour_cap():
    levels = DeviceLevels(vape=2)
    assert compute_passive_income(levels, EARLY, 24) == 240
    assert compute_passive_income(levels, EARLY, 100) == compute_passive_income(levels, EARLY, 24)


def test_fractional_hours_floor():
    # 10/hr * 1.5h = 15
    levels = DeviceLevels(vape=2)
    assert compute_passive_income(levels, EARLY, 1.5) == 15
    # 10/hr * 0.05h = 0.5 -> 0
    assert compute_passive_income(levels, EARLY, 0.05) == 0


def test_passive_deflation():
    levels = DeviceLevels(vape=2)
    # 150 players: 1 - 50*0.002 = 0.9 -> 240 * 0.9 = 216
    stats = GlobalStats(total_players=150)
    assert get_passive_deflation_factor(stats) == pytest.approx(0.9)
    assert compute_passive_income(levels, stats, 24) == 216


def test_passive_deflation_floor():
    # 1000 players: max(0.2, 1 - 1.8) = 0.2 -> 240 * 0.2 = 48
    stats = GlobalStats(total_players=1000)
    assert get_passive_deflation_factor(stats) == 0.2
    assert compute_passive_income(DeviceLevels(vape=2), stats, 24) == 48


def test_passive_ignores_pool_depletion():
    levels = DeviceLevels(cigar=5)
    full = GlobalStats(total_players=99, rewards_pool_remaining=45_000_000)
    drained = GlobalStats(total_players=99, rewards_pool_remaining=0)
    assert compute_passive_income(levels, full, 12) == compute_passive_income(levels, drained, 12)

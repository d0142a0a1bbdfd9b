import tempfile
from datetime import date, datetime, timezone
from pathlib import Path

import pytest

from economy.models import DeviceLevels, GlobalStats
from game.accounts import PlayerAccount
from game.store import PlayerStore


def test_get_or_create_starts_at_zero():
    store = PlayerStore()
    account = store.get_or_create("W1")
    assert account.levels == DeviceLevels()
    assert store.get_or_create("W1") is account
    assert len(store) == 1
    assert "W1" in store


def test_unknown_wallet():
    with pytest.raises(KeyError):
        PlayerStore().get("ghost")


def test_duplicate_add_rejected():
    store = PlayerStore()
    store.add(PlayerAccount(wallet="W1"))
    with pytest.raises(ValueError):
        store.add(PlayerAccount(wallet="W1"))


def test_passive_eligible_filter():
    store = PlayerStore()
    store.add(PlayerAccount(wallet="a", levels=DeviceLevels(vape=1)))
    store.add(PlayerAccount(wallet="b", levels=DeviceLevels(cigar=2)))
    assert [a.wallet for a in store.passive_eligible()] == ["b"]


def test_snapshot_restores_accounts_and_stats():
    claimed_at = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
    store = PlayerStore(stats=GlobalStats(total_players=120, rewards_pool_remaining=44_000_000.5,
                                          circulating_supply=1234.0))
    store.add(PlayerAccount(
        wallet="7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU",
        levels=DeviceLevels(vape=3, cigarette=1, cigar=0),
        balance=12.5, total_earned=40.0, total_spent=3.0, total_claimed=24.5,
        total_puffs=7, last_passive_claim=claimed_at, passive_accumulated=20.0,
        streak_days=4, last_active_date=date(2026, 3, 1),
    ))
    store.add(PlayerAccount(wallet="newbie"))

    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "sessions" / "players.toml"
        store.save(path)
        loaded = PlayerStore.load(path)

    assert loaded.stats == store.stats
    assert len(loaded) == 2
    restored = loaded.get("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")
    assert restored == store.get("7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU")
    newbie = loaded.get("newbie")
    assert newbie.last_passive_claim is None
    assert newbie.last_active_date is None


def test_load_missing_snapshot():
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FileNotFoundError):
            PlayerStore.load(Path(tmpdir) / "missing.toml")

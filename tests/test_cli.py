import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

import run
from economy.models import DeviceLevels, GlobalStats
from game.accounts import PlayerAccount
from game.ledger import LedgerReader
from game.store import PlayerStore


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "puffquest.toml"
    path.write_text(
        "[paths]\n"
        f'store = "{(tmp_path / "players.toml").as_posix()}"\n'
        f'ledger = "{(tmp_path / "ledger.jsonl").as_posix()}"\n'
        "\n[logging]\n"
        'level = "WARNING"\n'
    )
    return path


def test_estimate(config_path, capsys):
    assert run.main(["--config", str(config_path), "estimate", "--players", "10"]) == 0
    out = capsys.readouterr().out
    assert "from_actions=1260 from_passive=0 total=1260" in out
    assert "can_breakeven=True days_to_breakeven=1" in out


def test_passive_and_stats(config_path, tmp_path, capsys):
    store = PlayerStore(stats=GlobalStats(total_players=10))
    store.add(PlayerAccount(
        wallet="W1", levels=DeviceLevels(vape=2), total_puffs=3,
        last_passive_claim=datetime.now(timezone.utc) - timedelta(days=2),
    ))
    store.save(tmp_path / "players.toml")

    assert run.main(["--config", str(config_path), "passive"]) == 0
    assert "users_processed=1" in capsys.readouterr().out
    assert PlayerStore.load(tmp_path / "players.toml").get("W1").balance == 240

    assert run.main(["--config", str(config_path), "stats"]) == 0
    out = capsys.readouterr().out
    assert "total_players=1" in out
    reloaded = PlayerStore.load(tmp_path / "players.toml")
    assert reloaded.stats.rewards_pool_remaining == 45_000_000 - 240

    types = [e["transaction_type"] for e in LedgerReader(tmp_path / "ledger.jsonl").all_entries()]
    assert types == ["earn_passive", "stats_updated"]


def test_command_required():
    with pytest.raises(SystemExit):
        run.main([])

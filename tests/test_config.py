import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from game.config import GameConfig, get_config, load_config


def test_default_config_file():
    config = get_config()
    assert config.economy.exchange_rate == 0.01
    assert config.economy.breakeven_days == 3
    assert config.passive.min_hours_between_claims == 1.0
    assert config.paths.store == Path("sessions/players.toml")


def test_defaults_without_file():
    config = GameConfig()
    assert config.passive.default_backfill_hours == 24.0
    assert config.logging.level == "INFO"


def test_partial_override():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "custom.toml"
        path.write_text('[passive]\nmin_hours_between_claims = 2.5\n\n[logging]\nlevel = "DEBUG"\n')
        config = load_config(path)
    assert config.passive.min_hours_between_claims == 2.5
    assert config.logging.level == "DEBUG"
    assert config.economy.exchange_rate == 0.01


def test_invalid_value_rejected():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "bad.toml"
        path.write_text("[economy]\nexchange_rate = 0\n")
        with pytest.raises(ValidationError):
            load_config(path)


def test_missing_explicit_config():
    with pytest.raises(FileNotFoundError):
        load_config(Path("does/not/exist.toml"))

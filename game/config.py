"""
PuffQuest - game/config.py
Runtime configuration loaded from TOML, validated by Pydantic.
==============================================================
Stack:       Python 3.12 | Pydantic v2 | tomllib

Only operational settings live here (paths, batch cadence, projection
defaults, logging). Economy coefficients stay in economy/engine.py so the
session and batch paths can never disagree.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from economy.engine import BREAKEVEN_TARGET_DAYS, DEFAULT_EXCHANGE_RATE

# ================================================================================
# SCHEMAS
# ================================================================================

class PathsConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    store: Path = Path("sessions/players.toml")
    ledger: Path = Path("sessions/ledger.jsonl")


class PassiveConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    min_hours_between_claims: float = Field(default=1.0, ge=0.0)
    # Hours credited on a player's first passive run (no previous claim)
    default_backfill_hours: float = Field(default=24.0, ge=0.0)


class EconomyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    exchange_rate: float = Field(default=DEFAULT_EXCHANGE_RATE, gt=0.0)
    breakeven_days: int = Field(default=BREAKEVEN_TARGET_DAYS, ge=1)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    level: str = "INFO"
    file: str = ""


class GameConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    passive: PassiveConfig = Field(default_factory=PassiveConfig)
    economy: EconomyConfig = Field(default_factory=EconomyConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ================================================================================
# LOADER & CACHE
# ================================================================================

_CONFIG_CACHE: Optional[GameConfig] = None

DATA_DIR = Path(__file__).parent.parent / "data"
DEFAULT_CONFIG_PATH = DATA_DIR / "puffquest.toml"


def load_config(path: Path) -> GameConfig:
    """Load and validate a config file. No caching."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return GameConfig(**data)


def get_config() -> GameConfig:
    """Default config from data/puffquest.toml. Cached globally."""
    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    if not DEFAULT_CONFIG_PATH.exists():
        _CONFIG_CACHE = GameConfig()
    else:
        _CONFIG_CACHE = load_config(DEFAULT_CONFIG_PATH)
    return _CONFIG_CACHE

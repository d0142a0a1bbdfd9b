"""
PuffQuest - run.py
Command-line entry point for the economy batch jobs and projections.

    python run.py passive               # hourly passive-income run
    python run.py stats                 # rebuild global stats
    python run.py estimate --vape 3     # daily earnings + break-even
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from economy.engine import can_breakeven_in_n_days, estimate_daily_earnings
from economy.models import INITIAL_POOL, DeviceLevels, GlobalStats
from game.config import GameConfig, get_config, load_config
from game.events import EventBus
from game.ledger import TransactionLedger
from game.logging_config import setup_logging
from game.store import PlayerStore
from jobs.global_stats import update_global_stats
from jobs.passive_income import run_passive_income

logger = logging.getLogger("puffquest")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="puffquest", description="PuffQuest economy tools")
    parser.add_argument("--config", type=Path, default=None, help="Path to a puffquest.toml")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("passive", help="Run the hourly passive-income job")
    sub.add_parser("stats", help="Recompute global stats from all accounts")

    est = sub.add_parser("estimate", help="Project daily earnings and break-even")
    for kind in ("vape", "cigarette", "cigar"):
        est.add_argument(f"--{kind}", type=int, default=0)
    est.add_argument("--streak", type=int, default=1)
    est.add_argument("--players", type=int, default=0)
    est.add_argument("--pool", type=float, default=INITIAL_POOL)
    return parser


def _load_store(config: GameConfig) -> PlayerStore:
    if config.paths.store.exists():
        return PlayerStore.load(config.paths.store)
    logger.warning("No store at %s, starting empty", config.paths.store)
    return PlayerStore()


def cmd_passive(config: GameConfig) -> int:
    store = _load_store(config)
    bus = EventBus()
    TransactionLedger(bus, config.paths.ledger)
    report = run_passive_income(
        store,
        now=datetime.now(timezone.utc),
        min_hours=config.passive.min_hours_between_claims,
        backfill_hours=config.passive.default_backfill_hours,
        bus=bus,
    )
    store.save(config.paths.store)
    print(f"users_processed={report.users_processed} users_failed={report.users_failed} "
          f"total_awarded={report.total_awarded}")
    return 0


def cmd_stats(config: GameConfig) -> int:
    store = _load_store(config)
    bus = EventBus()
    TransactionLedger(bus, config.paths.ledger)
    stats = update_global_stats(store, bus)
    store.save(config.paths.store)
    print(f"total_players={stats.total_players} "
          f"rewards_pool_remaining={stats.rewards_pool_remaining:.2f} "
          f"circulating_supply={stats.circulating_supply:.2f}")
    return 0


def cmd_estimate(config: GameConfig, args: argparse.Namespace) -> int:
    levels = DeviceLevels(vape=args.vape, cigarette=args.cigarette, cigar=args.cigar)
    stats = GlobalStats(total_players=args.players, rewards_pool_remaining=args.pool)
    daily = estimate_daily_earnings(levels, stats, args.streak)
    projection = can_breakeven_in_n_days(
        levels, stats,
        exchange_rate=config.economy.exchange_rate,
        days=config.economy.breakeven_days,
        streak_days=args.streak,
    )
    print(f"from_actions={daily.from_actions} from_passive={daily.from_passive} total={daily.total}")
    print(f"conversion_rate={daily.conversion_rate} tokens_earned={daily.tokens_earned:.6f}")
    days = "unreachable" if projection.days_to_breakeven is None else projection.days_to_breakeven
    print(f"can_breakeven={projection.can_breakeven} days_to_breakeven={days}")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config(args.config) if args.config else get_config()
    setup_logging(config.logging.level, config.logging.file)

    if args.command == "passive":
        return cmd_passive(config)
    if args.command == "stats":
        return cmd_stats(config)
    return cmd_estimate(config, args)


if __name__ == "__main__":
    sys.exit(main())

"""
Entry point for Idle Tycoon.
Usage: python -m idle_tycoon [--headless --seconds N]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .campaign import Campaign
from .logging_config import setup_logging
from .numfmt import format_number
from .persistence import load_settings, save_path_for, settings_path_for, try_load_game
from .session import MAX_TICK_SECONDS, Session


def run_headless(data_dir: Path, seconds: float, dt: float, load: bool) -> Session:
    """Simulate ``seconds`` of idle play without opening a window."""
    logger = logging.getLogger(f"{__name__}.headless")
    campaign = Campaign.default()
    settings = load_settings(settings_path_for(data_dir))
    save_path = save_path_for(data_dir)

    state = try_load_game(save_path, campaign) if load else None
    if state is None:
        session = Session.new_game(campaign, settings, save_path)
    else:
        session = Session(state, campaign, settings, save_path)

    elapsed = 0.0
    while elapsed < seconds:
        step = min(dt, seconds - elapsed)
        # Session.tick clamps long frames, so feed it pieces it will accept
        remaining = step
        while remaining > 0:
            piece = min(remaining, MAX_TICK_SECONDS)
            session.tick(piece)
            remaining -= piece
        elapsed += step

    state = session.state
    logger.info(
        "Simulated %.1fs in %s: money %s, lifetime %s, %s/s",
        elapsed,
        session.level.name,
        format_number(state.money),
        format_number(state.lifetime_earnings),
        format_number(session.production_per_second),
    )
    session.save()
    return session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="idle-tycoon", description="Idle Tycoon")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, default=Path.cwd(), help="directory holding saves/")
    parser.add_argument("--log-level", default="INFO", help="console log level")
    parser.add_argument("--log-file", type=Path, default=None, help="also write a debug log here")
    parser.add_argument("--headless", action="store_true", help="simulate without graphics")
    parser.add_argument("--seconds", type=float, default=60.0, help="headless simulated seconds")
    parser.add_argument("--dt", type=float, default=0.1, help="headless timestep")
    parser.add_argument("--load", action="store_true", help="headless: continue from the save slot")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    logger = logging.getLogger(f"{__name__}.main")

    if args.dt <= 0:
        logger.error("--dt must be positive")
        return 2

    if args.headless:
        run_headless(args.data_dir, args.seconds, args.dt, args.load)
        return 0

    from .app import run_app

    logger.info("Starting Idle Tycoon %s", __version__)
    run_app(args.data_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())

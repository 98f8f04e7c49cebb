#!/usr/bin/env python3
"""
Watch AI players play a full Yatzy game in the terminal.

Usage:
    python yatzy.py                             # 2 AI players, 6 dice, saved settings
    python yatzy.py --dice 12 --players 3       # Extended game, 3 players
    python yatzy.py --speed instant --replay    # No pacing, print the turn log
    python yatzy.py --strategies ratio random   # Pick a strategy per seat

Settings in ~/.yatzy_settings.json supply defaults; flags override them.
"""
import argparse
import random
import sys

from game_coordinator import GameCoordinator, make_strategy
from game_log import describe
from logging_utils import configure_logging
from settings import SPEEDS, load_settings


def parse_args(argv=None, defaults=None):
    """Parse command-line arguments.

    Args:
        argv: Optional list of args (for testing). None uses sys.argv.
        defaults: Settings dict supplying defaults (see settings.DEFAULTS).

    Returns:
        Parsed argparse.Namespace.
    """
    defaults = defaults if defaults is not None else load_settings()
    parser = argparse.ArgumentParser(description="Yatzy AI spectator game")
    parser.add_argument("--dice", type=int, choices=[5, 6, 12], default=defaults["dice_count"],
                        help="Number of dice: 5, 6 or 12 (extended)")
    parser.add_argument("--players", type=int, default=2, metavar="N",
                        help="Number of AI players (default: 2)")
    parser.add_argument("--strategies", nargs="+", choices=["ratio", "random"], metavar="TYPE",
                        help="Strategy per seat (ratio, random); overrides --players")
    parser.add_argument("--max-rolls", type=int, default=defaults["max_rolls"],
                        help="Rolls per turn")
    parser.add_argument("--threshold", type=float, default=defaults["ai_threshold"],
                        help="Ratio at which the AI stops re-rolling")
    parser.add_argument("--speed", choices=SPEEDS, default=defaults["speed"],
                        help="AI playback speed")
    parser.add_argument("--seed", type=int, help="Seed for reproducible games")
    parser.add_argument("--replay", action="store_true", help="Print the full turn log at the end")
    parser.add_argument("--log-level", default=defaults["log_level"],
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    parser.add_argument("--log-file", help="Also write log output to this file")
    args = parser.parse_args(argv)
    if args.players < 1:
        parser.error("--players must be at least 1")
    if args.max_rolls < 1:
        parser.error("--max-rolls must be at least 1")
    if not 0 < args.threshold <= 1:
        parser.error("--threshold must be in (0, 1]")
    return args


def build_coordinator(args):
    """Create a GameCoordinator for the parsed arguments."""
    rng = random.Random(args.seed)
    tokens = args.strategies or ["ratio"] * args.players
    players = [(f"AI {i + 1} ({token})", make_strategy(token, args.dice, args.threshold, rng))
               for i, token in enumerate(tokens)]
    return GameCoordinator(dice_count=args.dice, players=players, speed=args.speed,
                           rng=rng, max_rolls=args.max_rolls)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(level=args.log_level, log_file=args.log_file)
    coordinator = build_coordinator(args)
    state = coordinator.play_game()

    if args.replay:
        names = [name for name, _ in coordinator.player_configs]
        for entry in coordinator.game_log.entries:
            print(describe(entry, names))

    print(f"Final standings ({state.dice_count} dice, {coordinator.total_rounds} rounds):")
    for place, (name, total) in enumerate(coordinator.standings(), start=1):
        print(f"  {place}. {name:20s} {total:5d}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Yatzy AI Benchmark — Run N games per variant and strategy and print score distributions.

Usage: python ai_benchmark.py [--games N] [--dice 5 6 12] [--strategy NAME]
       python ai_benchmark.py --verbose --games 50
       python ai_benchmark.py --csv --games 200
"""
import argparse
import random
import statistics
import time

from ai import AI_THRESHOLD, RandomStrategy, RatioStrategy, play_game


def benchmark_strategy(make_strategy, dice_count, num_games, start_seed=0):
    """Run num_games solo games and return final totals and elapsed time."""
    scores = []
    t0 = time.perf_counter()
    for seed in range(start_seed, start_seed + num_games):
        rng = random.Random(seed)
        state = play_game(dice_count, [make_strategy(dice_count, rng)], rng=rng)
        scores.append(state.scorecards[0].get_total_points())
    elapsed = time.perf_counter() - t0
    return scores, elapsed


def summarize(scores):
    """avg, stdev, median, min, max, p25, p75 of a score list."""
    ordered = sorted(scores)
    n = len(ordered)
    return {
        "avg": sum(ordered) / n,
        "stdev": statistics.stdev(ordered) if n >= 2 else 0.0,
        "median": statistics.median(ordered),
        "min": ordered[0],
        "max": ordered[-1],
        "p25": ordered[n // 4],
        "p75": ordered[(3 * n) // 4],
    }


def print_results(name, scores, elapsed, verbose=False):
    """Print formatted benchmark results; verbose adds spread statistics."""
    stats = summarize(scores)
    per_game = elapsed / len(scores) * 1000  # ms per game
    print(f"  {name:25s}  avg={stats['avg']:6.1f}  min={stats['min']:4d}  max={stats['max']:4d}  "
          f"({len(scores)} games in {elapsed:.2f}s, {per_game:.1f}ms/game)")
    if verbose:
        print(f"  {'':25s}  stdev={stats['stdev']:5.1f}  median={stats['median']:5.0f}  "
              f"p25={stats['p25']:4d}  p75={stats['p75']:4d}")


def print_csv_header():
    """Print CSV header row."""
    print("strategy,dice,games,avg,stdev,median,min,max,p25,p75,elapsed_s")


def print_csv_row(name, dice_count, scores, elapsed):
    """Print one CSV data row."""
    s = summarize(scores)
    print(f"{name},{dice_count},{len(scores)},{s['avg']:.1f},{s['stdev']:.1f},{s['median']:.0f},"
          f"{s['min']},{s['max']},{s['p25']},{s['p75']},{elapsed:.2f}")


def build_strategies(threshold=AI_THRESHOLD):
    """name -> factory(dice_count, rng) for every benchmarked strategy."""
    return {
        "ratio": (f"Ratio(t={threshold:g})",
                  lambda dice_count, rng: RatioStrategy(dice_count, threshold=threshold)),
        "random": ("Random",
                   lambda dice_count, rng: RandomStrategy(dice_count, rng=rng)),
    }


def main(argv=None):
    parser = argparse.ArgumentParser(description="Yatzy AI Benchmark")
    parser.add_argument("--games", type=int, default=200,
                        help="Number of games per strategy and variant (default: 200)")
    parser.add_argument("--dice", type=int, nargs="+", choices=[5, 6, 12], default=[5, 6, 12],
                        help="Variants to benchmark (default: all)")
    parser.add_argument("--strategy", choices=["ratio", "random"],
                        help="Run only a single strategy (default: all)")
    parser.add_argument("--threshold", type=float, default=AI_THRESHOLD,
                        help="Ratio threshold for the ratio strategy")
    parser.add_argument("--verbose", action="store_true",
                        help="Show extra statistics (stdev, median, percentiles)")
    parser.add_argument("--csv", action="store_true",
                        help="Output results as CSV")
    args = parser.parse_args(argv)

    all_strategies = build_strategies(args.threshold)
    if args.strategy:
        strategies = [all_strategies[args.strategy]]
    else:
        strategies = list(all_strategies.values())

    if args.csv:
        print_csv_header()
        for dice_count in args.dice:
            for name, factory in strategies:
                scores, elapsed = benchmark_strategy(factory, dice_count, args.games)
                print_csv_row(name, dice_count, scores, elapsed)
        return 0

    print(f"Yatzy AI Benchmark: {args.games} games per strategy")
    print("=" * 80)
    for dice_count in args.dice:
        print(f"{dice_count} dice")
        for name, factory in strategies:
            scores, elapsed = benchmark_strategy(factory, dice_count, args.games)
            print_results(name, scores, elapsed, verbose=args.verbose)
    print("=" * 80)
    return 0


if __name__ == "__main__":
    main()

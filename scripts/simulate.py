#!/usr/bin/env python3
"""
Simulation script

Usage:
    python scripts/simulate.py --games 1000 --seed 42
    python scripts/simulate.py --games 5000 --workers 4 --output results.json
    python scripts/simulate.py --games 200 --double-runs --player heuristic
"""
import argparse
import logging
import sys
from pathlib import Path
import json

# Add the project root to the path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.config import GameConfig
from evaluation import (
    SimulationConfig,
    FixedPolicyAgent,
    HeuristicAgent,
    ParallelSimulator,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Cribbage Simulation")

    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Master random seed")
    parser.add_argument("--workers", type=int, default=1, help="Worker threads")
    parser.add_argument("--max-rounds", type=int, default=200, help="Round limit per game")
    parser.add_argument(
        "--player",
        type=str,
        default="fixed",
        choices=["fixed", "heuristic"],
        help="Policy driving the human seat",
    )
    parser.add_argument(
        "--double-runs",
        action="store_true",
        help="Score every distinct run when counting hands",
    )
    parser.add_argument("--log-every", type=int, default=0, help="Progress interval (games)")
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def build_config(args) -> SimulationConfig:
    return SimulationConfig(
        n_games=args.games,
        seed=args.seed,
        max_rounds=args.max_rounds,
        n_workers=args.workers,
        log_every=args.log_every,
        game=GameConfig(count_double_runs=args.double_runs, record_events=False),
    )


def main():
    args = parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    config = build_config(args)
    if args.player == "heuristic":
        player_agent = HeuristicAgent("player")
    else:
        player_agent = FixedPolicyAgent("player")

    logger.info(
        f"Simulating {config.n_games} games "
        f"(seed={config.seed}, workers={config.n_workers})"
    )
    simulator = ParallelSimulator(
        config=config,
        player_agent=player_agent,
        computer_agent=HeuristicAgent("computer"),
    )
    summary = simulator.run()

    logger.info("=" * 50)
    logger.info("Simulation Results")
    logger.info("=" * 50)
    logger.info(f"Games: {summary.total_games}")
    logger.info(f"Player wins: {summary.player_wins} ({summary.win_rate_percent:.1f}%)")
    logger.info(
        f"Computer wins: {summary.computer_wins} "
        f"({summary.computer_win_rate_percent:.1f}%)"
    )
    logger.info(f"Average player score: {summary.avg_player_score:.1f}")
    logger.info(f"Average computer score: {summary.avg_computer_score:.1f}")
    logger.info(f"Average rounds: {summary.avg_rounds:.1f}")
    if summary.forced_completions:
        logger.info(f"Forced play completions: {summary.forced_completions}")
    logger.info("=" * 50)

    if args.output:
        with open(args.output, "w") as f:
            json.dump({
                "summary": summary.to_dict(),
                "results": [r.to_dict() for r in simulator.get_results()],
            }, f, indent=2)
        logger.info(f"Results saved to {args.output}")

    return summary


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
对战脚本

Usage:
    python scripts/play.py --mode watch          # 观看四个 AI 对战
    python scripts/play.py --mode play           # 坐在 0 号位与 AI 对战
    python scripts/play.py --parameters checkpoints/parameters_9.json --games 10
"""
import argparse
import logging
import sys
from pathlib import Path

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from evaluation import Arena
from policy import HumanPlayer, SearchPlayer, RandomPlayer, MAX_SEARCH_DEPTH
from training import load_parameters

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Pusoy Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="watch",
        choices=["watch", "play"],
        help="Mode: watch AI or play against AI",
    )
    parser.add_argument("--parameters", type=str, help="Cost model parameters (JSON)")
    parser.add_argument(
        "--opponent",
        type=str,
        default="search",
        choices=["search", "random"],
        help="Opponent type",
    )
    parser.add_argument("--depth", type=int, default=MAX_SEARCH_DEPTH, help="Search depth in cards")
    parser.add_argument("--games", type=int, default=1, help="Number of games")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--verbose", action="store_true", help="Show every play")

    return parser.parse_args()


def make_opponent(args, parameters, seat: int):
    if args.opponent == "random":
        seed = None if args.seed is None else args.seed + seat
        return RandomPlayer(seed=seed, name=f"random-{seat}")
    return SearchPlayer(parameters, max_depth=args.depth, name=f"search-{seat}")


def main():
    args = parse_args()

    if args.verbose or args.mode == "play":
        logging.getLogger("evaluation").setLevel(logging.DEBUG)

    parameters = load_parameters(args.parameters) if args.parameters else None

    players = [make_opponent(args, parameters, seat) for seat in range(4)]
    if args.mode == "play":
        players[0] = HumanPlayer()

    arena = Arena(players)
    result = arena.play_games(args.games, seed=args.seed)
    logger.info(result)


if __name__ == "__main__":
    main()

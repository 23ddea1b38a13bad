#!/usr/bin/env python3
"""
校准脚本

Usage:
    python scripts/train.py --steps 10
    python scripts/train.py --steps 5 --games-per-cpu 2 --rounds 50 --save-dir checkpoints
    python scripts/train.py --resume checkpoints/parameters_4.json --steps 5
"""
import argparse
import logging
import sys
from pathlib import Path

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from training import (
    CalibrationConfig,
    Calibrator,
    CheckpointCallback,
    EarlyStoppingCallback,
    load_parameters,
    save_parameters,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Pusoy cost model calibration")

    # 采样
    parser.add_argument("--steps", type=int, default=10, help="Training steps")
    parser.add_argument("--games-per-cpu", type=int, default=1, help="Self-play games per CPU core")
    parser.add_argument("--workers", type=int, default=None, help="Override number of games per step")
    parser.add_argument("--depth", type=int, default=6, help="Search depth in cards during self-play")

    # 蜂群
    parser.add_argument("--bees", type=int, default=10, help="Bee colony size")
    parser.add_argument("--rounds", type=int, default=10, help="Bee colony rounds per step")

    # 保存
    parser.add_argument("--save-dir", type=str, default="checkpoints", help="Save directory")
    parser.add_argument("--save-freq", type=int, default=1, help="Save frequency")
    parser.add_argument("--patience", type=int, default=0, help="Early stopping patience (0 = off)")

    # 其他
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--resume", type=str, default=None, help="Resume from saved parameters")

    return parser.parse_args()


def main():
    args = parse_args()

    config = CalibrationConfig(
        games_per_cpu=args.games_per_cpu,
        n_workers=args.workers,
        search_depth=args.depth,
        n_bees=args.bees,
        n_rounds=args.rounds,
        seed=args.seed,
    )

    callbacks = [CheckpointCallback(args.save_dir, save_freq=args.save_freq)]
    if args.patience > 0:
        callbacks.append(EarlyStoppingCallback(patience=args.patience))

    parameters = load_parameters(args.resume) if args.resume else None

    logger.info("=" * 50)
    logger.info("Pusoy Calibration")
    logger.info("=" * 50)
    logger.info(f"Steps: {args.steps}")
    logger.info(f"Config: {config}")
    logger.info("=" * 50)

    calibrator = Calibrator(config, parameters=parameters, callbacks=callbacks)
    stats = calibrator.train(args.steps)

    final_path = Path(args.save_dir) / "parameters_final.json"
    save_parameters(final_path, stats.parameters, loss=stats.loss)

    logger.info("=" * 50)
    logger.info("Calibration completed!")
    logger.info(f"Final parameters: {stats.parameters}")
    logger.info(f"Final loss: {stats.loss:.4f}")
    logger.info(f"Saved to {final_path}")
    logger.info("=" * 50)


if __name__ == "__main__":
    main()

"""
自博弈采样

并发进行多局自博弈，从每局的出牌记录中提取训练样本
"""
from typing import List, Optional, Sequence
from concurrent.futures import ThreadPoolExecutor
import logging
import os
import random

from core.cards import Card, shuffled_deck
from core.plays import Play
from core.state import GameState, N_PLAYERS
from evaluation.arena import run_game
from policy.players import Player, SearchPlayer

from .buffer import Sample, SampleBuffer
from .config import CalibrationConfig

logger = logging.getLogger(__name__)


def play_game(
    players: Sequence[Player],
    seed: Optional[int] = None,
    deck: Optional[Sequence[Card]] = None,
) -> GameState:
    """
    洗牌、发牌并把一局进行到底

    Args:
        players: 每个座位的玩家
        seed: 洗牌种子
        deck: 指定牌序 (优先于 seed)
    """
    if deck is None:
        deck = shuffled_deck(random.Random(seed))
    return run_game(GameState(deck, len(players)), players)


def harvest_samples(record: Sequence[Play], n_players: int = N_PLAYERS) -> List[Sample]:
    """
    从出牌记录中提取样本

    对第 i 手非 PASS 的牌，同一玩家之后每一手非 PASS 的牌
    (第 i + k * n_players 手) 生成一个样本，间隔为 k 轮。
    """
    samples = []
    for i, before in enumerate(record):
        if before.is_pass:
            continue
        for j in range(i + n_players, len(record), n_players):
            after = record[j]
            if not after.is_pass:
                samples.append(Sample(before, after, (j - i) // n_players))
    return samples


def _self_play_worker(
    parameters: Sequence[float],
    search_depth: int,
    seed: Optional[int],
    buffer: SampleBuffer,
    worker_id: int,
) -> int:
    """单个工作线程: 四个相同权重的搜索玩家自博弈一局，结束时一次性写入缓冲区"""
    players = [
        SearchPlayer(parameters, max_depth=search_depth, name=f"search-{seat}")
        for seat in range(N_PLAYERS)
    ]
    state = play_game(players, seed=seed)
    samples = harvest_samples(state.record, N_PLAYERS)
    buffer.extend(samples)

    logger.info(
        f"Worker {worker_id} finished game: winner #{state.winner}, "
        f"{state.turn_index} turns, {len(samples)} samples"
    )
    return len(samples)


def collect_samples(
    parameters: Sequence[float],
    config: Optional[CalibrationConfig] = None,
    buffer: Optional[SampleBuffer] = None,
) -> SampleBuffer:
    """
    并发自博弈采样

    每个工作线程独立进行一局；全部完成后返回。
    任何一个工作线程出错都会向上抛出。

    Args:
        parameters: 当前代价模型权重
        config: 校准配置
        buffer: 追加样本的缓冲区，None 则新建

    Returns:
        包含所有样本的缓冲区
    """
    config = config or CalibrationConfig()
    buffer = buffer if buffer is not None else SampleBuffer()

    n_workers = config.n_workers or (os.cpu_count() or 1) * config.games_per_cpu

    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = [
            executor.submit(
                _self_play_worker,
                parameters,
                config.search_depth,
                None if config.seed is None else config.seed + i,
                buffer,
                i,
            )
            for i in range(n_workers)
        ]
        # result() 会重新抛出工作线程中的异常
        for future in futures:
            future.result()

    logger.info(f"Collected {len(buffer)} samples from {n_workers} games")
    return buffer

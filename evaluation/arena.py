"""
对战竞技场

驱动四个玩家完成对局，并统计胜负
"""
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field
from collections import defaultdict
import logging
import random

from core.cards import Card, cards_to_str, shuffled_deck
from core.state import GameState, N_PLAYERS
from policy.players import Player

logger = logging.getLogger(__name__)


def run_game(state: GameState, players: Sequence[Player]) -> GameState:
    """
    把一局游戏进行到底

    每回合把当前玩家的受限视图交给对应的 Player，执行其选择，直到有人出完。

    Returns:
        已结束的 GameState
    """
    if len(players) != state.n_players:
        raise ValueError(f"Need {state.n_players} players, got {len(players)}")

    while not state.is_finished:
        seat = state.current_player
        play = players[seat].choose_play(state.view())

        if play.is_pass:
            logger.debug(f"player #{seat} passed")
        else:
            logger.debug(f"player #{seat} played {cards_to_str(play.cards)}")

        state.apply(play)

    return state


@dataclass
class MatchResult:
    """对局结果"""
    agents: tuple
    winner: int
    winner_agent: str
    turns: int
    cards_left: List[int]
    record_length: int


@dataclass
class TournamentResult:
    """多局统计"""
    wins: Dict[int, int]
    total_games: int
    matches: List[MatchResult] = field(default_factory=list)

    def win_rate(self, seat: int) -> float:
        if self.total_games == 0:
            return 0.0
        return self.wins.get(seat, 0) / self.total_games

    def __repr__(self) -> str:
        lines = [f"Results ({self.total_games} games):"]
        for seat in sorted(self.wins):
            lines.append(f"  seat {seat}: {self.win_rate(seat):.2%}")
        return "\n".join(lines)


class Arena:
    """
    对战竞技场

    固定四个座位的玩家，进行一局或多局
    """

    def __init__(self, players: Sequence[Player]):
        if len(players) != N_PLAYERS:
            raise ValueError(f"Arena needs {N_PLAYERS} players, got {len(players)}")
        self.players = list(players)

    def play_game(
        self,
        seed: Optional[int] = None,
        deck: Optional[Sequence[Card]] = None,
    ) -> MatchResult:
        """
        进行一局

        Args:
            seed: 洗牌种子
            deck: 指定牌序 (优先于 seed)
        """
        if deck is None:
            deck = shuffled_deck(random.Random(seed))
        state = run_game(GameState(deck, N_PLAYERS), self.players)

        winner = state.winner
        logger.info(f"player #{winner} ({self.players[winner].name}) won after {state.turn_index} turns")

        return MatchResult(
            agents=tuple(p.name for p in self.players),
            winner=winner,
            winner_agent=self.players[winner].name,
            turns=state.turn_index,
            cards_left=state.hand_sizes(),
            record_length=len(state.record),
        )

    def play_games(self, n_games: int, seed: Optional[int] = None) -> TournamentResult:
        """
        连续进行多局

        Args:
            n_games: 局数
            seed: 起始种子，第 i 局使用 seed + i
        """
        wins: Dict[int, int] = defaultdict(int)
        matches = []

        for i in range(n_games):
            game_seed = None if seed is None else seed + i
            result = self.play_game(seed=game_seed)
            wins[result.winner] += 1
            matches.append(result)

        return TournamentResult(
            wins=dict(wins),
            total_games=n_games,
            matches=matches,
        )

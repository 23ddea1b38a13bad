"""
游戏状态

GameState 持有所有玩家的手牌，只交给驱动对局的一方使用；
玩家只能拿到 GameView，看不到别人的手牌和出牌记录。
"""
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import random

from .cards import Card, OPENING_CARD, deal, shuffled_deck
from .plays import Play
from .rules import RuleEngine
from .errors import GameOver, StaleView

logger = logging.getLogger(__name__)

N_PLAYERS = 4


class Phase(Enum):
    """游戏阶段"""
    FIRST_TURN = "first_turn"    # 第一手，必须打出梅花 3
    IN_PROGRESS = "in_progress"  # 正常出牌
    FINISHED = "finished"        # 有人出完牌


class GameState:
    """
    可变游戏状态

    Attributes:
        hands: 各座位手牌
        current_player: 当前行动的座位
        table_play: 桌面上最近一次非 PASS 的出牌 (首轮前为 None)
        last_player_to_not_pass: 最近一次非 PASS 出牌的座位 (决定出牌权)
        turn_index: 已经进行的回合数
        winner: 赢家座位
    """

    def __init__(self, cards: Sequence[Card], n_players: int = N_PLAYERS):
        """
        Args:
            cards: 洗好的整副牌
            n_players: 玩家数

        Raises:
            ValueError: 牌不能平均分配，或梅花 3 不在牌中
        """
        self.hands: List[List[Card]] = deal(cards, n_players)
        self.n_players = n_players

        # 持有梅花 3 的玩家先出
        starters = [i for i, hand in enumerate(self.hands) if OPENING_CARD in hand]
        if len(starters) != 1:
            raise ValueError(f"Supplied deck must contain exactly one {OPENING_CARD}")

        self.current_player: int = starters[0]
        self.table_play: Optional[Play] = None
        self.last_player_to_not_pass: int = starters[0]
        self.turn_index: int = 0
        self.winner: Optional[int] = None
        self._record: List[Play] = []

    @classmethod
    def initial(cls, seed: Optional[int] = None, n_players: int = N_PLAYERS) -> 'GameState':
        """
        洗牌并发牌，创建新的一局

        Args:
            seed: 随机种子
        """
        return cls(shuffled_deck(random.Random(seed)), n_players)

    @property
    def phase(self) -> Phase:
        if self.winner is not None:
            return Phase.FINISHED
        if self.turn_index == 0:
            return Phase.FIRST_TURN
        return Phase.IN_PROGRESS

    @property
    def is_finished(self) -> bool:
        return self.winner is not None

    @property
    def record(self) -> Tuple[Play, ...]:
        """按顺序记录的所有出牌 (含 PASS)"""
        return tuple(self._record)

    def is_first_turn(self) -> bool:
        return self.turn_index == 0

    def has_control(self) -> bool:
        """当前玩家是否拥有出牌权 (其他人都已 PASS)"""
        return self.last_player_to_not_pass == self.current_player

    def hand(self, seat: int) -> List[Card]:
        return list(self.hands[seat])

    def my_hand(self) -> List[Card]:
        return self.hand(self.current_player)

    def hand_sizes(self) -> List[int]:
        return [len(hand) for hand in self.hands]

    def attempt_play(self, cards: Iterable[Card]) -> Play:
        """
        验证当前玩家出这组牌是否合法 (不修改状态)

        检查顺序: 牌型 -> 首轮/出牌权/大小 -> 手牌

        Returns:
            识别出的 Play

        Raises:
            GameError 的各个子类
        """
        if self.is_finished:
            raise GameOver(f"Game already won by player {self.winner}")

        play = RuleEngine.infer_play(cards)
        RuleEngine.check_play(
            play,
            self.table_play,
            first_turn=self.is_first_turn(),
            has_control=self.has_control(),
        )
        RuleEngine.check_in_hand(self.hands[self.current_player], play)
        return play

    def apply(self, play: Play) -> None:
        """
        执行一手已验证的出牌

        Raises:
            GameOver: 游戏已经结束
            CardNotInHand: 有牌不在当前玩家手中 (此时手牌不变)
        """
        if self.is_finished:
            raise GameOver(f"Game already won by player {self.winner}")

        seat = self.current_player
        hand = self.hands[seat]
        RuleEngine.check_in_hand(hand, play)
        for card in play.cards:
            hand.remove(card)

        self._record.append(play)

        if not play.is_pass:
            self.last_player_to_not_pass = seat
            self.table_play = play

        if not hand:
            self.winner = seat
            logger.debug(f"Player {seat} emptied their hand after {self.turn_index + 1} turns")

        self.turn_index += 1
        self.current_player = (seat + 1) % self.n_players

    def play(self, cards: Iterable[Card]) -> Play:
        """验证并执行"""
        play = self.attempt_play(cards)
        self.apply(play)
        return play

    def view(self) -> 'GameView':
        """当前玩家的受限视图"""
        return GameView(self)


class GameView:
    """
    玩家可见的受限视图

    只暴露当前玩家自己的手牌、桌面上的牌和 attempt_play，
    不能看到其他人的手牌或出牌记录。
    视图只在创建它的那一回合内有效，之后除 seat 外的查询都抛出 StaleView。
    """

    __slots__ = ('_state', '_seat', '_turn')

    def __init__(self, state: GameState):
        self._state = state
        self._seat = state.current_player
        self._turn = state.turn_index

    def _check_turn(self):
        if self._state.turn_index != self._turn:
            raise StaleView(
                f"View for player {self._seat} expired after turn {self._turn}"
            )

    @property
    def seat(self) -> int:
        return self._seat

    def my_hand(self) -> List[Card]:
        self._check_turn()
        return self._state.hand(self._seat)

    def play_on_table(self) -> Optional[Play]:
        self._check_turn()
        return self._state.table_play

    def is_first_turn(self) -> bool:
        self._check_turn()
        return self._state.is_first_turn()

    def has_control(self) -> bool:
        self._check_turn()
        return self._state.has_control()

    def attempt_play(self, cards: Iterable[Card]) -> Play:
        self._check_turn()
        return self._state.attempt_play(cards)

"""
玩家

所有玩家只通过 GameView 做决定:
- SearchPlayer: 前瞻搜索，选择平均代价最低的第一手
- HumanPlayer: 控制台输入
- RandomPlayer: 随机出一手合法的牌 (对照基线)
"""
from typing import Callable, List, Optional, Sequence
import logging
import random

from core.cards import Card, cards_to_str, str_to_cards
from core.finder import Finder
from core.plays import Play
from core.state import GameView
from core.errors import GameError

from .cost import CostModel
from .search import SearchState, aggregate_leaves, first_move_costs, rank_first_moves

logger = logging.getLogger(__name__)

MAX_SEARCH_DEPTH = 6


class Player:
    """玩家基类"""

    def __init__(self, name: str = "player"):
        self.name = name

    def choose_play(self, view: GameView) -> Play:
        """根据受限视图选择一手合法的牌"""
        raise NotImplementedError


class SearchPlayer(Player):
    """
    搜索型玩家

    在自己的手牌上做深度为 min(max_depth, 手牌数) 张牌的前瞻，
    按第一手汇总平均代价，选最低的那手。
    真实桌面不接受时先尝试 PASS，再按代价顺序依次尝试其它第一手。
    """

    def __init__(
        self,
        parameters: Optional[Sequence[float]] = None,
        max_depth: int = MAX_SEARCH_DEPTH,
        memoize: bool = True,
        wrap_straits: bool = False,
        name: str = "search",
    ):
        """
        Args:
            parameters: 代价模型的 10 个权重，None 使用默认值
            max_depth: 最大搜索张数
            memoize: 是否使用带记忆的汇总 (结果相同，速度更快)
            wrap_straits: 顺子是否允许从 2 接回 3
        """
        super().__init__(name)
        self.cost_model = CostModel(parameters)
        self.max_depth = max_depth
        self.memoize = memoize
        self.wrap_straits = wrap_straits

    def rank_moves(self, view: GameView) -> List[tuple]:
        """返回 (第一手, 平均代价)，按代价从低到高"""
        hand = view.my_hand()
        plays = Finder(hand, wrap_straits=self.wrap_straits).all_plays()
        depth = min(self.max_depth, len(hand))
        root = SearchState.root(self.cost_model, view)

        if self.memoize:
            totals = first_move_costs(plays, root, depth)
        else:
            totals = aggregate_leaves(plays, root, depth)
        return rank_first_moves(totals)

    def choose_play(self, view: GameView) -> Play:
        ranked = self.rank_moves(view)
        if not ranked:
            raise RuntimeError(f"Search found no move for hand {cards_to_str(view.my_hand())}")

        best = ranked[0][0]
        try:
            return view.attempt_play(best.cards)
        except GameError as e:
            logger.debug(f"Best move {best} rejected ({type(e).__name__}), trying to pass")

        try:
            return view.attempt_play(())
        except GameError:
            logger.debug("Cannot pass, falling back to ranked alternatives")

        for play, _ in ranked[1:]:
            try:
                return view.attempt_play(play.cards)
            except GameError:
                continue

        raise RuntimeError(
            f"No legal move for hand {cards_to_str(view.my_hand())} "
            f"against {view.play_on_table()}"
        )


class HumanPlayer(Player):
    """控制台玩家，反复提示直到输入合法"""

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        name: str = "human",
    ):
        super().__init__(name)
        self.input_fn = input_fn
        self.output_fn = output_fn

    def choose_play(self, view: GameView) -> Play:
        while True:
            table = view.play_on_table()
            self.output_fn(f"table: {table if table is not None else '-'}")
            self.output_fn(f"your turn - {cards_to_str(view.my_hand())}")
            line = self.input_fn("> ")

            try:
                cards: List[Card] = str_to_cards(line)
            except ValueError as e:
                self.output_fn(f"invalid input: {e}")
                continue

            try:
                return view.attempt_play(cards)
            except GameError as e:
                self.output_fn(f"invalid turn: {type(e).__name__}: {e}")


class RandomPlayer(Player):
    """随机玩家"""

    def __init__(self, seed: Optional[int] = None, name: str = "random"):
        super().__init__(name)
        self.rng = random.Random(seed)

    def choose_play(self, view: GameView) -> Play:
        candidates = Finder(view.my_hand()).all_plays() + [Play.pass_play()]
        self.rng.shuffle(candidates)
        for play in candidates:
            try:
                return view.attempt_play(play.cards)
            except GameError:
                continue
        raise RuntimeError(f"No legal move for hand {cards_to_str(view.my_hand())}")

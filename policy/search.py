"""
前瞻搜索

在自己的手牌上枚举互不重叠的出牌序列 (按张数限制深度)，
累计每一步的代价，再按第一手汇总平均代价。
"""
from enum import Enum
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple
import math

from core.cards import OPENING_CARD
from core.plays import Play
from core.state import GameView
from core.errors import GameError

from .cost import CostModel


class StatusKind(Enum):
    """下一手要与什么比较"""
    FIRST_TURN_OF_GAME = "first_turn_of_game"  # 整局第一手
    FIRST_ANALYSIS = "first_analysis"          # 与真实桌面比较
    REST = "rest"                              # 与模拟序列中的上一手比较


@dataclass(frozen=True)
class Status:
    kind: StatusKind
    previous: Optional[Play] = None


@dataclass(frozen=True)
class SearchState:
    """
    搜索中一条序列的状态

    Attributes:
        cost_model: 代价模型
        view: 受限视图，只在第一手时用来检查能否直接出
        status: 下一手的比较对象
        total_cost: 累计代价
        plays_so_far: 已选择的出牌序列
    """
    cost_model: CostModel
    view: GameView
    status: Status
    total_cost: float = 0.0
    plays_so_far: Tuple[Play, ...] = ()

    @classmethod
    def root(cls, cost_model: CostModel, view: GameView) -> 'SearchState':
        table = view.play_on_table()
        if table is None:
            status = Status(StatusKind.FIRST_TURN_OF_GAME)
        else:
            status = Status(StatusKind.FIRST_ANALYSIS, table)
        return cls(cost_model=cost_model, view=view, status=status)

    def transition_cost(self, play: Play) -> float:
        """从当前状态打出 play 的代价"""
        status = self.status
        if status.kind == StatusKind.FIRST_TURN_OF_GAME:
            # 首轮只有包含梅花 3 的牌能出
            return 0.0 if OPENING_CARD in play.cards else math.inf

        if status.kind == StatusKind.FIRST_ANALYSIS:
            try:
                self.view.attempt_play(play.cards)
            except GameError:
                return self.cost_model.first_analysis_cost(status.previous, play)
            return 0.0

        return self.cost_model.cost(status.previous, play)

    def next_state(self, play: Play) -> 'SearchState':
        return SearchState(
            cost_model=self.cost_model,
            view=self.view,
            status=Status(StatusKind.REST, play),
            total_cost=self.total_cost + self.transition_cost(play),
            plays_so_far=self.plays_so_far + (play,),
        )


def search(
    card_depth: int,
    available_plays: Sequence[Play],
    state: SearchState,
    on_leaf: Callable[[SearchState], None],
) -> None:
    """
    枚举所有用满 card_depth 张牌、互不重叠的出牌序列

    用显式栈代替递归，已用的牌用位掩码记录。
    每条序列结束时调用 on_leaf。
    """
    stack = [(card_depth, 0, state)]
    while stack:
        remaining, used, current = stack.pop()
        if remaining == 0:
            on_leaf(current)
            continue

        children = []
        for play in available_plays:
            n_cards = len(play)
            if n_cards > remaining or play.mask & used:
                continue
            children.append((remaining - n_cards, used | play.mask, current.next_state(play)))

        # 逆序入栈，保持与递归相同的遍历顺序
        stack.extend(reversed(children))


def aggregate_leaves(
    available_plays: Sequence[Play],
    root: SearchState,
    card_depth: int,
) -> Dict[Play, Tuple[float, int]]:
    """逐个叶子汇总: 第一手 -> (代价总和, 叶子数)"""
    totals: Dict[Play, Tuple[float, int]] = {}

    def on_leaf(state: SearchState):
        first_play = state.plays_so_far[0]
        total, count = totals.get(first_play, (0.0, 0))
        totals[first_play] = (total + state.total_cost, count + 1)

    search(card_depth, available_plays, root, on_leaf)
    return totals


def first_move_costs(
    available_plays: Sequence[Play],
    root: SearchState,
    card_depth: int,
) -> Dict[Play, Tuple[float, int]]:
    """
    带记忆的汇总，结果与 aggregate_leaves 相同

    第一手之后的代价只取决于已用的牌和上一手，
    因此 (已用掩码, 上一手) 相同的子树只需计算一次。
    """
    cost_model = root.cost_model
    plays = list(available_plays)
    memo: Dict[Tuple[int, int], Tuple[int, float]] = {}

    def suffix(used: int, prev_index: int, remaining: int) -> Tuple[int, float]:
        key = (used, prev_index)
        if key in memo:
            return memo[key]

        if remaining == 0:
            result = (1, 0.0)
        else:
            count, total = 0, 0.0
            prev = plays[prev_index]
            for i, play in enumerate(plays):
                n_cards = len(play)
                if n_cards > remaining or play.mask & used:
                    continue
                sub_count, sub_total = suffix(used | play.mask, i, remaining - n_cards)
                if sub_count:
                    count += sub_count
                    total += sub_total + cost_model.cost(prev, play) * sub_count
            result = (count, total)

        memo[key] = result
        return result

    totals: Dict[Play, Tuple[float, int]] = {}
    for i, play in enumerate(plays):
        n_cards = len(play)
        if n_cards > card_depth:
            continue
        first_cost = root.transition_cost(play)
        count, total = suffix(play.mask, i, card_depth - n_cards)
        if count == 0:
            continue
        totals[play] = (first_cost * count + total, count)

    return totals


def rank_first_moves(totals: Dict[Play, Tuple[float, int]]) -> List[Tuple[Play, float]]:
    """
    按平均代价从低到高排序第一手

    平均代价相同时保持原有顺序。
    """
    averages = [(play, total / count) for play, (total, count) in totals.items()]
    return sorted(averages, key=lambda item: item[1])

"""
代价模型

估计在某手牌之后，要等多少轮才能打出下一手牌 ("摩擦代价")。
10 个权重的含义:

    0  单张/对子，上一手能保住出牌权
    1  单张/对子，与上一手的差距 > RANK_GAP_THRESHOLD
    2  单张/对子，与上一手的差距较小
    3  顺子/同花
    4  葫芦
    5-9  同 0-4，用于与真实桌面比较的第一手

四条和同花顺很少见，代价固定为 0。
"""
from typing import Callable, Optional, Sequence
import numpy as np

from core.cards import Rank
from core.plays import Play, PlayKind

N_PARAMETERS = 10

DEFAULT_PARAMETERS = np.array(
    [0.0, 1.0, 10.0, 5.0, 0.5, 0.0, 0.0, 3.0, 0.0, 0.0]
)
DEFAULT_PARAMETERS.setflags(write=False)

# 首轮分析使用的权重偏移
FIRST_ANALYSIS_OFFSET = 5

# numeric_value 的差距 (0..51)
RANK_GAP_THRESHOLD = 20


def would_retain_control(play: Play) -> bool:
    """
    粗略判断这手牌打出后是否还能拿回出牌权

    单张/对子看点数是否为 A 或 2；葫芦、四条、同花顺视为可以。
    """
    if play.is_pass:
        raise ValueError("PASS has no control value")
    if play.kind in (PlayKind.SINGLE, PlayKind.PAIR):
        return play.ranking_card.rank in (Rank.ACE, Rank.TWO)
    if play.kind in (PlayKind.STRAIT, PlayKind.FLUSH):
        return False
    return True


class CostModel:
    """
    10 维权重的代价函数

    权重在一局内只读；control_rule 可以替换出牌权的判断规则。
    """

    def __init__(
        self,
        parameters: Optional[Sequence[float]] = None,
        control_rule: Callable[[Play], bool] = would_retain_control,
    ):
        if parameters is None:
            parameters = DEFAULT_PARAMETERS
        params = np.array(parameters, dtype=np.float64)
        if params.shape != (N_PARAMETERS,):
            raise ValueError(
                f"Expected {N_PARAMETERS} parameters, got shape {params.shape}"
            )
        params.setflags(write=False)
        self.parameters = params
        self.control_rule = control_rule

    def cost_index(self, before: Play, after: Play, first: bool = False) -> Optional[int]:
        """
        after 接在 before 之后时使用的权重编号

        Args:
            before: 上一手
            after: 下一手
            first: 是否为与真实桌面比较的第一手

        Returns:
            权重编号，四条/同花顺返回 None (代价为 0)
        """
        if before.is_pass or after.is_pass:
            raise ValueError("Cannot cost a transition involving PASS")

        offset = FIRST_ANALYSIS_OFFSET if first else 0

        if after.kind in (PlayKind.SINGLE, PlayKind.PAIR):
            if self.control_rule(before):
                return offset
            gap = after.ranking_card.numeric_value - before.ranking_card.numeric_value
            if gap > RANK_GAP_THRESHOLD:
                return offset + 1
            return offset + 2
        if after.kind in (PlayKind.STRAIT, PlayKind.FLUSH):
            return offset + 3
        if after.kind == PlayKind.FULL_HOUSE:
            return offset + 4
        return None

    def _weight(self, index: Optional[int]) -> float:
        if index is None:
            return 0.0
        return float(self.parameters[index])

    def cost(self, before: Play, after: Play) -> float:
        """模拟序列中两手之间的代价"""
        return self._weight(self.cost_index(before, after))

    def first_analysis_cost(self, table: Play, play: Play) -> float:
        """第一手无法直接压过真实桌面时的代价"""
        return self._weight(self.cost_index(table, play, first=True))

    def __repr__(self) -> str:
        return f"CostModel({np.array2string(self.parameters, precision=3)})"

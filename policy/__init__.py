"""
Policy Layer - 自动出牌

Modules:
    cost: 代价模型
    search: 前瞻搜索
    players: 玩家实现
"""
from .cost import (
    N_PARAMETERS,
    DEFAULT_PARAMETERS,
    CostModel,
    would_retain_control,
)

from .search import (
    StatusKind,
    Status,
    SearchState,
    search,
    aggregate_leaves,
    first_move_costs,
    rank_first_moves,
)

from .players import (
    Player,
    SearchPlayer,
    HumanPlayer,
    RandomPlayer,
    MAX_SEARCH_DEPTH,
)

__all__ = [
    # cost
    "N_PARAMETERS",
    "DEFAULT_PARAMETERS",
    "CostModel",
    "would_retain_control",
    # search
    "StatusKind",
    "Status",
    "SearchState",
    "search",
    "aggregate_leaves",
    "first_move_costs",
    "rank_first_moves",
    # players
    "Player",
    "SearchPlayer",
    "HumanPlayer",
    "RandomPlayer",
    "MAX_SEARCH_DEPTH",
]

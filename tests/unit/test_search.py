"""前瞻搜索测试"""
import math

import numpy as np
import pytest

from core.cards import OPENING_CARD, str_to_cards
from core.finder import Finder
from core.plays import PlayKind
from core.state import GameState
from policy.cost import CostModel, N_PARAMETERS
from policy.search import (
    StatusKind,
    SearchState,
    search,
    aggregate_leaves,
    first_move_costs,
    rank_first_moves,
)


def root_for(state: GameState, parameters=None) -> SearchState:
    return SearchState.root(CostModel(parameters), state.view())


def hand_plays(state: GameState):
    return Finder(state.my_hand()).all_plays()


class TestSearchState:
    """搜索状态测试"""

    def test_root_first_turn(self, deck_builder):
        state = GameState(deck_builder({0: "3C"}))
        root = root_for(state)
        assert root.status.kind == StatusKind.FIRST_TURN_OF_GAME
        assert root.total_cost == 0.0
        assert root.plays_so_far == ()

    def test_root_first_analysis(self, pair_table_state):
        root = root_for(pair_table_state)
        assert root.status.kind == StatusKind.FIRST_ANALYSIS
        assert root.status.previous == pair_table_state.table_play

    def test_first_turn_costs(self, deck_builder):
        state = GameState(deck_builder({0: "3C 4C"}))
        root = root_for(state)
        opening = Finder(str_to_cards("3C")).infer()
        other = Finder(str_to_cards("4C")).infer()
        assert root.transition_cost(opening) == 0.0
        assert math.isinf(root.transition_cost(other))

    def test_first_analysis_accepted_is_free(self, pair_table_state):
        root = root_for(pair_table_state)
        play = Finder(str_to_cards("8C 8S")).infer()
        assert root.transition_cost(play) == 0.0

    def test_first_analysis_rejected(self, pair_table_state):
        root = root_for(pair_table_state)
        play = Finder(str_to_cards("5C")).infer()
        # 对 7 之后的单张 5: 差距为负，使用首手权重 7
        assert root.transition_cost(play) == 3.0

    def test_next_state(self, pair_table_state):
        root = root_for(pair_table_state)
        play = Finder(str_to_cards("5C")).infer()
        child = root.next_state(play)
        assert child.status.kind == StatusKind.REST
        assert child.status.previous == play
        assert child.plays_so_far == (play,)
        assert child.total_cost == root.transition_cost(play)
        # 父状态不变
        assert root.plays_so_far == ()


class TestSearch:
    """序列枚举测试"""

    def test_leaves_use_exact_depth(self, pair_table_state):
        plays = hand_plays(pair_table_state)
        leaves = []
        search(3, plays, root_for(pair_table_state), leaves.append)
        assert leaves
        for leaf in leaves:
            cards = [card for play in leaf.plays_so_far for card in play.cards]
            assert len(cards) == 3
            assert len(set(cards)) == 3

    def test_depth_zero(self, pair_table_state):
        leaves = []
        search(0, hand_plays(pair_table_state), root_for(pair_table_state), leaves.append)
        assert len(leaves) == 1
        assert leaves[0].plays_so_far == ()

    def test_traversal_order(self, pair_table_state):
        plays = hand_plays(pair_table_state)
        leaves = []
        search(2, plays, root_for(pair_table_state), leaves.append)
        assert leaves[0].plays_so_far[0] == plays[0]
        last_fitting = [p for p in plays if len(p) <= 2][-1]
        assert leaves[-1].plays_so_far[0] == last_fitting

    def test_leaf_count_singles(self):
        # 只有单张时，叶子数是排列数
        state = GameState.initial(seed=0)
        plays = [p for p in hand_plays(state) if p.kind == PlayKind.SINGLE]
        leaves = []
        search(2, plays, root_for(state), leaves.append)
        assert len(leaves) == 13 * 12


class TestAggregation:
    """按第一手汇总测试"""

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_memo_matches_leaves(self, pair_table_state, depth):
        plays = hand_plays(pair_table_state)
        root = root_for(pair_table_state)
        leaves = aggregate_leaves(plays, root, depth)
        memo = first_move_costs(plays, root, depth)
        assert leaves.keys() == memo.keys()
        for play, (total, count) in leaves.items():
            assert memo[play][1] == count
            assert memo[play][0] == pytest.approx(total)

    def test_memo_matches_leaves_first_turn(self, deck_builder):
        state = GameState(deck_builder({0: "3C 3S 4C 5C 6C 7C"}))
        plays = hand_plays(state)
        root = root_for(state)
        leaves = aggregate_leaves(plays, root, 2)
        memo = first_move_costs(plays, root, 2)
        for play, (total, count) in leaves.items():
            assert memo[play][1] == count
            if math.isinf(total):
                assert math.isinf(memo[play][0])
            else:
                assert memo[play][0] == pytest.approx(total)

    def test_zero_weights(self, pair_table_state):
        plays = hand_plays(pair_table_state)
        root = root_for(pair_table_state, np.zeros(N_PARAMETERS))
        totals = first_move_costs(plays, root, 3)
        assert all(total == 0.0 for total, _ in totals.values())


class TestRanking:
    """排序测试"""

    def test_sort_by_average(self):
        a, b, c = Finder(str_to_cards("3C 4C 5C")).singles()
        ranked = rank_first_moves({a: (2.0, 1), b: (1.0, 1), c: (2.0, 2)})
        assert ranked == [(b, 1.0), (c, 1.0), (a, 2.0)]

    def test_first_turn_best_has_opening_card(self, deck_builder):
        state = GameState(deck_builder({0: "3C"}))
        plays = hand_plays(state)
        ranked = rank_first_moves(first_move_costs(plays, root_for(state), 2))
        best, cost = ranked[0]
        assert OPENING_CARD in best.cards
        assert not math.isinf(cost)
        assert math.isinf(ranked[-1][1])

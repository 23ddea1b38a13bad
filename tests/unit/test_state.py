"""游戏状态测试"""
import pytest

from core.cards import FULL_DECK, OPENING_CARD, str_to_cards
from core.plays import Play, PlayKind
from core.state import GameState, GameView, Phase
from core.errors import (
    MustOpenWithRequiredCard,
    CannotPassWithControl,
    WrongLength,
    TooLow,
    CardNotInHand,
    GameOver,
    StaleView,
)


class TestInitial:
    """初始状态测试"""

    def test_initial_deal(self):
        state = GameState.initial(seed=42)
        assert state.hand_sizes() == [13, 13, 13, 13]
        assert state.phase == Phase.FIRST_TURN
        assert OPENING_CARD in state.my_hand()

    def test_seeded_deal_is_deterministic(self):
        a = GameState.initial(seed=3)
        b = GameState.initial(seed=3)
        assert a.hands == b.hands

    def test_deck_without_opening_card(self):
        deck = [card for card in FULL_DECK if card != OPENING_CARD] + [FULL_DECK[1]]
        with pytest.raises(ValueError):
            GameState(deck)

    def test_uneven_deck(self):
        with pytest.raises(ValueError):
            GameState(FULL_DECK[:51])


class TestOpening:
    """首轮测试"""

    def test_opener_seat(self, deck_builder):
        state = GameState(deck_builder({2: "3C"}))
        assert state.current_player == 2
        assert state.is_first_turn()

    def test_opener_single(self, deck_builder):
        state = GameState(deck_builder({2: "3C"}))
        play = state.attempt_play(str_to_cards("3C"))
        assert play.kind == PlayKind.SINGLE

    def test_other_seat_rejected(self, deck_builder):
        state = GameState(deck_builder({2: "3C"}))
        state.current_player = 0
        with pytest.raises(MustOpenWithRequiredCard):
            state.attempt_play(state.my_hand()[:1])

    def test_opener_without_opening_card(self, deck_builder):
        state = GameState(deck_builder({2: "3C 4C"}))
        with pytest.raises(MustOpenWithRequiredCard):
            state.attempt_play(str_to_cards("4C"))

    def test_card_not_in_hand(self, deck_builder):
        state = GameState(deck_builder({2: "3C", 0: "3S"}))
        with pytest.raises(CardNotInHand):
            state.attempt_play(str_to_cards("3C 3S"))


class TestControl:
    """出牌权测试"""

    def test_pass_with_control(self, deck_builder):
        state = GameState(deck_builder({0: "3C"}))
        state.play(str_to_cards("3C"))
        for _ in range(3):
            state.play([])
        assert state.current_player == 0
        assert state.has_control()
        with pytest.raises(CannotPassWithControl):
            state.attempt_play([])

    def test_control_any_length(self, deck_builder):
        state = GameState(deck_builder({0: "3C 4C 4S"}))
        state.play(str_to_cards("3C"))
        for _ in range(3):
            state.play([])
        play = state.play(str_to_cards("4C 4S"))
        assert play.kind == PlayKind.PAIR
        assert state.table_play == play

    def test_pass_keeps_table(self, deck_builder):
        state = GameState(deck_builder({0: "3C"}))
        opening = state.play(str_to_cards("3C"))
        state.play([])
        assert state.table_play == opening
        assert state.last_player_to_not_pass == 0
        assert state.current_player == 2


class TestPairOnTable:
    """桌面为对子时的测试"""

    def test_single_wrong_length(self, pair_table_state):
        assert pair_table_state.current_player == 2
        assert not pair_table_state.has_control()
        with pytest.raises(WrongLength):
            pair_table_state.attempt_play(str_to_cards("8C"))

    def test_lower_pair(self, pair_table_state):
        with pytest.raises(TooLow):
            pair_table_state.attempt_play(str_to_cards("5C 5S"))

    def test_higher_pair(self, pair_table_state):
        play = pair_table_state.attempt_play(str_to_cards("8C 8S"))
        assert play.kind == PlayKind.PAIR

    def test_same_rank_higher_suit(self, pair_table_state):
        play = pair_table_state.attempt_play(str_to_cards("7S 7D"))
        assert play.ranking_card == str_to_cards("7D")[0]

    def test_apply_only_touches_acting_seat(self, pair_table_state):
        before = [pair_table_state.hand(seat) for seat in range(4)]
        pair_table_state.play(str_to_cards("8C 8S"))
        after = [pair_table_state.hand(seat) for seat in range(4)]
        assert sorted(set(before[2]) - set(after[2])) == str_to_cards("8C 8S")
        assert len(after[2]) == 11
        for seat in (0, 1, 3):
            assert after[seat] == before[seat]
        assert pair_table_state.current_player == 3
        assert pair_table_state.last_player_to_not_pass == 2

    def test_attempt_is_idempotent(self, pair_table_state):
        before = (pair_table_state.hand_sizes(), pair_table_state.turn_index)
        first = pair_table_state.attempt_play(str_to_cards("8C 8S"))
        second = pair_table_state.attempt_play(str_to_cards("8C 8S"))
        assert first == second
        assert (pair_table_state.hand_sizes(), pair_table_state.turn_index) == before


class TestFinish:
    """终局测试"""

    def _nearly_done(self, deck_builder):
        state = GameState(deck_builder({0: "3C"}))
        # 直接改写 0 号手牌，构造只剩两张牌的残局
        state.hands[0] = [OPENING_CARD, FULL_DECK[-1]]
        return state

    def test_winner(self, deck_builder):
        state = self._nearly_done(deck_builder)
        state.play(str_to_cards("3C"))
        for _ in range(3):
            state.play([])
        state.play(str_to_cards("2D"))
        assert state.winner == 0
        assert state.is_finished
        assert state.phase == Phase.FINISHED

    def test_game_over(self, deck_builder):
        state = self._nearly_done(deck_builder)
        state.play(str_to_cards("3C"))
        for _ in range(3):
            state.play([])
        state.play(str_to_cards("2D"))
        with pytest.raises(GameOver):
            state.attempt_play([])
        with pytest.raises(GameOver):
            state.play([])


class TestRecord:
    """出牌记录测试"""

    def test_record_includes_passes(self, pair_table_state):
        pair_table_state.play([])
        record = pair_table_state.record
        assert len(record) == 3
        assert record[2].is_pass
        assert pair_table_state.turn_index == 3

    def test_cards_conserved(self, pair_table_state):
        played = sum(len(p) for p in pair_table_state.record)
        assert sum(pair_table_state.hand_sizes()) + played == len(FULL_DECK)

    def test_record_is_copy(self, pair_table_state):
        record = pair_table_state.record
        pair_table_state.play([])
        assert len(record) == 2


class TestView:
    """受限视图测试"""

    def test_view_fields(self, pair_table_state):
        view = pair_table_state.view()
        assert isinstance(view, GameView)
        assert view.seat == 2
        assert view.my_hand() == pair_table_state.hand(2)
        assert view.play_on_table() == pair_table_state.table_play
        assert not view.is_first_turn()
        assert not view.has_control()

    def test_view_hides_state(self, pair_table_state):
        view = pair_table_state.view()
        assert not hasattr(view, "hands")
        assert not hasattr(view, "record")
        with pytest.raises(AttributeError):
            view.extra = 1

    def test_view_attempt_does_not_mutate(self, pair_table_state):
        view = pair_table_state.view()
        view.attempt_play(str_to_cards("8C 8S"))
        assert pair_table_state.current_player == 2
        assert pair_table_state.hand_sizes()[2] == 13

    def test_hand_copy(self, pair_table_state):
        hand = pair_table_state.view().my_hand()
        hand.clear()
        assert pair_table_state.hand_sizes()[2] == 13

    def test_view_expires_after_apply(self, deck_builder):
        from policy.players import SearchPlayer

        state = GameState(deck_builder({0: "3C"}))
        view = state.view()
        play = SearchPlayer(max_depth=2).choose_play(view)
        state.apply(play)

        assert view.seat == 0
        assert state.current_player == 1
        with pytest.raises(StaleView):
            view.my_hand()
        with pytest.raises(StaleView):
            view.attempt_play(state.my_hand()[:1])
        with pytest.raises(StaleView):
            view.play_on_table()
        with pytest.raises(StaleView):
            view.has_control()

    def test_new_view_each_turn(self, pair_table_state):
        old = pair_table_state.view()
        pair_table_state.play([])
        new = pair_table_state.view()
        assert new.seat == 3
        assert new.my_hand() == pair_table_state.hand(3)
        with pytest.raises(StaleView):
            old.is_first_turn()


class TestApplyAtomic:
    """apply 失败时不修改状态"""

    def test_missing_card_leaves_hand(self, pair_table_state):
        hand = pair_table_state.hand(2)
        # 8♣ 在手中，8♥ 不在
        play = Play.new(PlayKind.PAIR, str_to_cards("8H")[0], str_to_cards("8C 8H"))
        with pytest.raises(CardNotInHand):
            pair_table_state.apply(play)
        assert pair_table_state.hand(2) == hand
        assert pair_table_state.current_player == 2
        assert len(pair_table_state.record) == 2

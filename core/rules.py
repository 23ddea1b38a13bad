"""
规则引擎 - 牌型识别、大小比较、合法性验证

所有方法都是纯函数，无状态
"""
from typing import Iterable, Optional, Sequence

from .cards import Card, OPENING_CARD
from .plays import Play
from .finder import Finder
from .errors import (
    NoSuchPlay,
    MustOpenWithRequiredCard,
    CannotPassWithControl,
    WrongLength,
    TooLow,
    CardNotInHand,
)


class RuleEngine:
    """
    Pusoy 规则引擎

    提供牌型识别、大小比较、合法性验证等功能
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def infer_play(cards: Iterable[Card]) -> Play:
        """
        识别一组牌的牌型

        Raises:
            NoSuchPlay: 不构成任何牌型
        """
        cards = list(cards)
        if len(set(cards)) != len(cards):
            raise NoSuchPlay(f"Duplicate cards: {cards}")
        play = Finder(cards).infer()
        if play is None:
            raise NoSuchPlay(f"Cards do not form a play: {cards}")
        return play

    @staticmethod
    def can_play_on(play: Play, table: Play) -> bool:
        """
        play 能否压在 table 上

        PASS 总是可以；张数不同则不行；否则比较大小
        """
        if play.is_pass:
            return True
        if not play.len_eq(table):
            return False
        return play.beats(table)

    @staticmethod
    def check_play(
        play: Play,
        table: Optional[Play],
        first_turn: bool,
        has_control: bool,
    ) -> None:
        """
        按桌面状态检查出牌 (不检查手牌)

        Args:
            play: 要出的牌
            table: 桌面上的牌 (首轮为 None)
            first_turn: 是否为整局第一手
            has_control: 当前玩家是否拥有出牌权

        Raises:
            MustOpenWithRequiredCard, CannotPassWithControl, WrongLength, TooLow
        """
        if first_turn:
            # 首轮唯一的要求是打出梅花 3
            if OPENING_CARD not in play.cards:
                raise MustOpenWithRequiredCard(f"First play must contain {OPENING_CARD}")
            return

        if has_control:
            if play.is_pass:
                raise CannotPassWithControl("Cannot pass while holding control")
            return

        # 没有出牌权时 PASS 总是合法
        if play.is_pass:
            return

        if not play.len_eq(table):
            raise WrongLength(
                f"{play} has {len(play)} cards, table has {len(table)}"
            )
        if not play.beats(table):
            raise TooLow(f"{play} does not beat {table}")

    @staticmethod
    def contains_cards(hand: Sequence[Card], cards: Iterable[Card]) -> bool:
        """手牌是否包含所有给定的牌"""
        hand_set = set(hand)
        return all(card in hand_set for card in cards)

    @staticmethod
    def check_in_hand(hand: Sequence[Card], play: Play) -> None:
        """
        Raises:
            CardNotInHand: 有牌不在手牌中
        """
        hand_set = set(hand)
        for card in play.cards:
            if card not in hand_set:
                raise CardNotInHand(f"{card} is not in hand")

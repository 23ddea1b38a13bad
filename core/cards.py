"""
牌的定义与编码

Pusoy (大老二) 使用一副 52 张的标准扑克:
- 点数从小到大: 3, 4, 5, 6, 7, 8, 9, 10, J, Q, K, A, 2
- 花色从小到大: 梅花 < 黑桃 < 红桃 < 方块
- 先比点数，再比花色
"""
from enum import IntEnum
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import random


class Rank(IntEnum):
    """点数 (按大小顺序编号)"""
    THREE = 0
    FOUR = 1
    FIVE = 2
    SIX = 3
    SEVEN = 4
    EIGHT = 5
    NINE = 6
    TEN = 7
    JACK = 8
    QUEEN = 9
    KING = 10
    ACE = 11
    TWO = 12


class Suit(IntEnum):
    """花色 (同点数时的比较顺序)"""
    CLUBS = 0
    SPADES = 1
    HEARTS = 2
    DIAMONDS = 3


RANK_TO_STR: Dict[Rank, str] = {
    Rank.THREE: '3', Rank.FOUR: '4', Rank.FIVE: '5', Rank.SIX: '6',
    Rank.SEVEN: '7', Rank.EIGHT: '8', Rank.NINE: '9', Rank.TEN: 'T',
    Rank.JACK: 'J', Rank.QUEEN: 'Q', Rank.KING: 'K', Rank.ACE: 'A',
    Rank.TWO: '2',
}

STR_TO_RANK: Dict[str, Rank] = {v: k for k, v in RANK_TO_STR.items()}
STR_TO_RANK['10'] = Rank.TEN

SUIT_TO_STR: Dict[Suit, str] = {
    Suit.CLUBS: '♣', Suit.SPADES: '♠', Suit.HEARTS: '♥', Suit.DIAMONDS: '♦',
}

# 输入时同时接受字母和符号
STR_TO_SUIT: Dict[str, Suit] = {
    'C': Suit.CLUBS, '♣': Suit.CLUBS,
    'S': Suit.SPADES, '♠': Suit.SPADES,
    'H': Suit.HEARTS, '♥': Suit.HEARTS,
    'D': Suit.DIAMONDS, '♦': Suit.DIAMONDS,
}

N_RANKS = len(Rank)
N_SUITS = len(Suit)
DECK_SIZE = N_RANKS * N_SUITS


@dataclass(frozen=True, order=True, slots=True)
class Card:
    """
    不可变的单张牌

    dataclass 的 order=True 按字段顺序比较，即先点数后花色，
    正好是游戏中的大小顺序。
    """
    rank: Rank
    suit: Suit

    @property
    def numeric_value(self) -> int:
        """0..51 的编号，同时也是位掩码中的位置"""
        return N_SUITS * self.rank + self.suit

    @property
    def bit(self) -> int:
        return 1 << self.numeric_value

    @classmethod
    def from_value(cls, value: int) -> 'Card':
        """从 0..51 的编号还原"""
        if not 0 <= value < DECK_SIZE:
            raise ValueError(f"Card value out of range: {value}")
        return cls(Rank(value // N_SUITS), Suit(value % N_SUITS))

    @classmethod
    def parse(cls, s: str) -> 'Card':
        """
        解析牌字符串

        Args:
            s: 如 "3C", "TH", "10♥", "2♦"

        Returns:
            Card

        Raises:
            ValueError: 无法识别的点数或花色
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Cannot parse card: {s!r}")
        rank_str, suit_str = s[:-1].upper(), s[-1].upper()
        if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
            raise ValueError(f"Cannot parse card: {s!r}")
        return cls(STR_TO_RANK[rank_str], STR_TO_SUIT[suit_str])

    def __str__(self) -> str:
        return f"{RANK_TO_STR[self.rank]}{SUIT_TO_STR[self.suit]}"

    def __repr__(self) -> str:
        return str(self)


# 完整牌组 (52 张，按大小排序)
FULL_DECK: Tuple[Card, ...] = tuple(
    Card(rank, suit) for rank in Rank for suit in Suit
)

# 首轮必须打出的牌
OPENING_CARD = Card(Rank.THREE, Suit.CLUBS)


def cards_to_mask(cards: Iterable[Card]) -> int:
    """将牌集合编码为 52 位整数掩码"""
    mask = 0
    for card in cards:
        mask |= card.bit
    return mask


def mask_to_cards(mask: int) -> List[Card]:
    """将位掩码解码为有序牌列表"""
    return [card for card in FULL_DECK if mask & card.bit]


def cards_to_str(cards: Iterable[Card]) -> str:
    """
    将牌列表转换为可读字符串

    Returns:
        如 "3♣ 3♠ T♥"，空列表返回 "Pass"
    """
    cards = sorted(cards)
    if not cards:
        return "Pass"
    return ' '.join(str(c) for c in cards)


def str_to_cards(s: str) -> List[Card]:
    """
    将空格分隔的字符串转换为牌列表

    Args:
        s: 如 "3C 3S TH"

    Returns:
        牌列表 (保持输入顺序)
    """
    return [Card.parse(token) for token in s.split()]


def shuffled_deck(rng: Optional[random.Random] = None) -> List[Card]:
    """返回洗好的一副牌"""
    rng = rng or random.Random()
    deck = list(FULL_DECK)
    rng.shuffle(deck)
    return deck


def deal(cards: Sequence[Card], n_groups: int) -> List[List[Card]]:
    """
    轮流发牌

    第 i 张牌发给第 i % n_groups 个玩家。

    Raises:
        ValueError: 牌数不能被平均分配
    """
    if n_groups <= 0 or len(cards) % n_groups != 0:
        raise ValueError(f"Cannot deal {len(cards)} cards evenly to {n_groups} players")

    groups: List[List[Card]] = [[] for _ in range(n_groups)]
    for i, card in enumerate(cards):
        groups[i % n_groups].append(card)
    return groups

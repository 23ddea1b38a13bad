"""
牌型定义

Pusoy 共有 8 种牌型 (含 PASS):
- 单张、对子
- 五张牌型: 顺子 < 同花 < 葫芦 < 四条(带一张) < 同花顺
"""
from enum import IntEnum
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Optional, Tuple

from .cards import Card, cards_to_mask, cards_to_str


class PlayKind(IntEnum):
    """牌型类型 (数值即同长度牌型之间的大小顺序)"""
    PASS = 0            # 过
    SINGLE = 1          # 单张
    PAIR = 2            # 对子
    STRAIT = 3          # 顺子 (5 张连续点数)
    FLUSH = 4           # 同花 (5 张同花色)
    FULL_HOUSE = 5      # 葫芦 (三张 + 对子)
    FOUR_OF_A_KIND = 6  # 四条 (四张 + 任意一张)
    STRAIT_FLUSH = 7    # 同花顺

    @property
    def length(self) -> int:
        """该牌型固定的张数"""
        return KIND_LENGTH[self]


KIND_LENGTH: Dict[PlayKind, int] = {
    PlayKind.PASS: 0,
    PlayKind.SINGLE: 1,
    PlayKind.PAIR: 2,
    PlayKind.STRAIT: 5,
    PlayKind.FLUSH: 5,
    PlayKind.FULL_HOUSE: 5,
    PlayKind.FOUR_OF_A_KIND: 5,
    PlayKind.STRAIT_FLUSH: 5,
}

FIVE_CARD_KINDS: Tuple[PlayKind, ...] = (
    PlayKind.STRAIT,
    PlayKind.FLUSH,
    PlayKind.FULL_HOUSE,
    PlayKind.FOUR_OF_A_KIND,
    PlayKind.STRAIT_FLUSH,
)


@dataclass(frozen=True, slots=True)
class Play:
    """
    不可变的一手牌

    Attributes:
        kind: 牌型
        cards: 组成这手牌的牌 (已排序)
        ranking_card: 同牌型比较时使用的牌，PASS 为 None
        mask: cards 的 52 位掩码 (不参与比较和哈希)
    """
    kind: PlayKind
    cards: Tuple[Card, ...]
    ranking_card: Optional[Card] = None
    mask: int = field(default=0, init=False, compare=False, repr=False)

    def __post_init__(self):
        cards = tuple(sorted(self.cards))
        if len(cards) != self.kind.length:
            raise ValueError(
                f"{self.kind.name} needs {self.kind.length} cards, got {len(cards)}"
            )
        if self.kind != PlayKind.PASS and self.ranking_card is None:
            raise ValueError(f"{self.kind.name} needs a ranking card")
        object.__setattr__(self, 'cards', cards)
        object.__setattr__(self, 'mask', cards_to_mask(cards))

    @classmethod
    def new(cls, kind: PlayKind, ranking_card: Card, cards: Iterable[Card]) -> 'Play':
        return cls(kind=kind, cards=tuple(cards), ranking_card=ranking_card)

    @classmethod
    def pass_play(cls) -> 'Play':
        """创建 PASS"""
        return cls(kind=PlayKind.PASS, cards=())

    @property
    def is_pass(self) -> bool:
        return self.kind == PlayKind.PASS

    def with_kind(self, kind: PlayKind) -> 'Play':
        """返回换了牌型的副本 (用于把顺子重新标记为同花顺)"""
        return replace(self, kind=kind)

    def len_eq(self, other: 'Play') -> bool:
        return len(self) == len(other)

    def _check_comparable(self, other: 'Play'):
        if self.is_pass or other.is_pass:
            raise ValueError("PASS cannot be ordered against other plays")
        if not self.len_eq(other):
            raise ValueError(
                f"Cannot compare {self.kind.name} ({len(self)} cards) "
                f"with {other.kind.name} ({len(other)} cards)"
            )

    def beats(self, other: 'Play') -> bool:
        """
        本手牌是否大于 other

        同长度时先比牌型，牌型相同再比 ranking_card。

        Raises:
            ValueError: 张数不同或包含 PASS
        """
        self._check_comparable(other)
        if self.kind != other.kind:
            return self.kind > other.kind
        return self.ranking_card > other.ranking_card

    def __gt__(self, other: 'Play') -> bool:
        return self.beats(other)

    def __lt__(self, other: 'Play') -> bool:
        return other.beats(self)

    def __ge__(self, other: 'Play') -> bool:
        return not other.beats(self)

    def __le__(self, other: 'Play') -> bool:
        return not self.beats(other)

    def __len__(self) -> int:
        return len(self.cards)

    def __str__(self) -> str:
        if self.is_pass:
            return "Pass"
        return f"{self.kind.name}({cards_to_str(self.cards)})"

"""
牌型查找器

根据任意一组牌枚举所有可以组成的合法牌型，
并能识别一组确定的牌组成的是哪一种牌型。

所有结果只依赖输入的牌，输出顺序确定。
"""
from typing import Iterable, List, Optional, Tuple
import itertools

from .cards import Card, N_RANKS, N_SUITS
from .plays import Play, PlayKind

FIVE_CARD_LEN = 5


def max_card(cards: Iterable[Card]) -> Card:
    return max(cards)


def do_overlap(cards: Iterable[Card], other: Iterable[Card]) -> bool:
    """两组牌是否有相同的牌"""
    other_set = set(other)
    return any(card in other_set for card in cards)


def are_flush(cards: Tuple[Card, ...]) -> bool:
    first_suit = cards[0].suit
    return all(c.suit == first_suit for c in cards[1:])


class Finder:
    """
    牌型查找器

    构造时对牌排序，并按点数、花色分块；之后的查询都基于这些分块。
    """

    def __init__(self, cards: Iterable[Card], wrap_straits: bool = False):
        """
        Args:
            cards: 任意一组牌 (手牌或其子集)
            wrap_straits: 顺子是否允许从 2 接回 3，默认不允许
        """
        self.cards: List[Card] = sorted(cards)
        self.wrap_straits = wrap_straits

        self.rank_blocks: List[List[Card]] = [[] for _ in range(N_RANKS)]
        self.suit_blocks: List[List[Card]] = [[] for _ in range(N_SUITS)]
        for card in self.cards:
            self.rank_blocks[card.rank].append(card)
            self.suit_blocks[card.suit].append(card)

    def all_plays(self) -> List[Play]:
        """
        生成所有可能的出牌 (不含 PASS)

        Returns:
            单张、对子、同花顺、四条、葫芦、同花、顺子
        """
        plays = []
        plays.extend(self.singles())
        plays.extend(self.pairs())
        plays.extend(self.strait_flushes())
        plays.extend(self.four_of_a_kinds())
        plays.extend(self.full_houses())
        plays.extend(self.flushes())
        plays.extend(self.straits())
        return plays

    def infer(self) -> Optional[Play]:
        """
        识别这组牌恰好组成的牌型

        Returns:
            0 张为 PASS，1 张为单张，2 张同点数为对子，
            5 张取优先级最高的五张牌型；其它情况返回 None
        """
        n = len(self.cards)
        if n == 0:
            return Play.pass_play()
        if n == 1:
            return Play.new(PlayKind.SINGLE, self.cards[0], self.cards)
        if n == 2:
            if self.cards[0].rank != self.cards[1].rank:
                return None
            return Play.new(PlayKind.PAIR, self.cards[1], self.cards)
        if n == FIVE_CARD_LEN:
            return self.max_five_card_play()
        return None

    def max_five_card_play(self) -> Optional[Play]:
        """按 同花顺 > 四条 > 葫芦 > 同花 > 顺子 的顺序返回第一个匹配的最大牌型"""
        for generate in (
            self.strait_flushes,
            self.four_of_a_kinds,
            self.full_houses,
            self.flushes,
            self.straits,
        ):
            plays = generate()
            if plays:
                return max(plays)
        return None

    def singles(self) -> List[Play]:
        """生成所有单张"""
        return [Play.new(PlayKind.SINGLE, card, (card,)) for card in self.cards]

    def n_of_a_kinds(self, n: int) -> List[Tuple[Card, ...]]:
        """
        生成所有 n 张同点数的组合

        同点数的不同花色是不同的牌，所以每个 n 元子集都算一种。
        """
        chunks = []
        for block in self.rank_blocks:
            if len(block) < n:
                continue
            chunks.extend(itertools.combinations(block, n))
        return chunks

    def pairs(self) -> List[Play]:
        """生成所有对子"""
        return [Play.new(PlayKind.PAIR, cs[-1], cs) for cs in self.n_of_a_kinds(2)]

    def four_of_a_kinds(self) -> List[Play]:
        """生成所有四条，每个四张配上其余任意一张"""
        result = []
        for quad in self.n_of_a_kinds(4):
            for card in self.cards:
                if card in quad:
                    continue
                result.append(Play.new(PlayKind.FOUR_OF_A_KIND, quad[-1], quad + (card,)))
        return result

    def full_houses(self) -> List[Play]:
        """生成所有葫芦 (三张 + 不重叠的对子)"""
        result = []
        pairs = self.n_of_a_kinds(2)
        for triple in self.n_of_a_kinds(3):
            for pair in pairs:
                if do_overlap(triple, pair):
                    continue
                result.append(Play.new(PlayKind.FULL_HOUSE, triple[-1], triple + pair))
        return result

    def flushes(self) -> List[Play]:
        """生成所有同花 (每种花色任选 5 张，点数连续的归为同花顺，不在此列出)"""
        result = []
        strait_flush_masks = {play.mask for play in self.strait_flushes()}
        for block in self.suit_blocks:
            if len(block) < FIVE_CARD_LEN:
                continue
            for cs in itertools.combinations(block, FIVE_CARD_LEN):
                play = Play.new(PlayKind.FLUSH, max_card(cs), cs)
                if play.mask not in strait_flush_masks:
                    result.append(play)
        return result

    def _strait_windows(self) -> List[List[List[Card]]]:
        """所有 5 个连续点数的分块窗口"""
        windows = []
        for start in range(N_RANKS):
            if not self.wrap_straits and start + FIVE_CARD_LEN > N_RANKS:
                continue
            windows.append([self.rank_blocks[(start + i) % N_RANKS] for i in range(FIVE_CARD_LEN)])
        return windows

    def straits(self) -> List[Play]:
        """
        生成所有顺子

        对每个起点取 5 个连续点数的分块，若每块都非空，
        则每块各取一张做笛卡尔积。
        """
        result = []
        for blocks in self._strait_windows():
            if not all(blocks):
                continue
            for cs in itertools.product(*blocks):
                result.append(Play.new(PlayKind.STRAIT, max_card(cs), cs))
        return result

    def strait_flushes(self) -> List[Play]:
        """生成所有同花顺 (同花色的顺子)"""
        return [
            strait.with_kind(PlayKind.STRAIT_FLUSH)
            for strait in self.straits()
            if are_flush(strait.cards)
        ]

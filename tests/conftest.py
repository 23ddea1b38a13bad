"""Pytest 共享工具"""
from typing import Dict, List

import pytest

from core.cards import FULL_DECK, Card, str_to_cards
from core.state import GameState, N_PLAYERS

HAND_SIZE = len(FULL_DECK) // N_PLAYERS


def build_deck(fixed: Dict[int, str]) -> List[Card]:
    """
    构造一副牌，使指定座位拿到指定的牌

    Args:
        fixed: 座位 -> 牌字符串 (如 {2: "3C 4S"})，其余牌按顺序补齐

    Returns:
        发牌后满足要求的 52 张牌序
    """
    hands: List[List[Card]] = [[] for _ in range(N_PLAYERS)]
    used = set()
    for seat, cards in fixed.items():
        for card in str_to_cards(cards):
            hands[seat].append(card)
            used.add(card)

    rest = [card for card in FULL_DECK if card not in used]
    for seat in range(N_PLAYERS):
        while len(hands[seat]) < HAND_SIZE:
            hands[seat].append(rest.pop(0))

    # deal() 把第 i 张牌发给 i % N_PLAYERS 号座位
    return [hands[i % N_PLAYERS][i // N_PLAYERS] for i in range(len(FULL_DECK))]


@pytest.fixture
def deck_builder():
    return build_deck


@pytest.fixture
def pair_table_state():
    """
    桌面上是一对 7 (7♣ 7♥)，轮到 2 号座位且没有出牌权

    0 号打出 3♣ 3♠，1 号打出 7♣ 7♥
    """
    deck = build_deck({
        0: "3C 3S",
        1: "7C 7H",
        2: "5C 5S 8C 8S 7S 7D",
    })
    state = GameState(deck)
    state.play(str_to_cards("3C 3S"))
    state.play(str_to_cards("7C 7H"))
    return state

"""
Core Layer - 纯游戏逻辑

Modules:
    cards: 牌定义与编码
    plays: 牌型与比较
    finder: 牌型枚举与识别
    errors: 非法出牌异常
    rules: 规则引擎
    state: 游戏状态与受限视图
"""
from .cards import (
    Rank,
    Suit,
    Card,
    FULL_DECK,
    OPENING_CARD,
    cards_to_mask,
    mask_to_cards,
    cards_to_str,
    str_to_cards,
    shuffled_deck,
    deal,
)

from .plays import (
    PlayKind,
    Play,
    KIND_LENGTH,
    FIVE_CARD_KINDS,
)

from .finder import Finder

from .errors import (
    GameError,
    NoSuchPlay,
    MustOpenWithRequiredCard,
    CannotPassWithControl,
    WrongLength,
    TooLow,
    CardNotInHand,
    GameOver,
    StaleView,
)

from .rules import RuleEngine

from .state import (
    Phase,
    GameState,
    GameView,
    N_PLAYERS,
)

__all__ = [
    # cards
    "Rank",
    "Suit",
    "Card",
    "FULL_DECK",
    "OPENING_CARD",
    "cards_to_mask",
    "mask_to_cards",
    "cards_to_str",
    "str_to_cards",
    "shuffled_deck",
    "deal",
    # plays
    "PlayKind",
    "Play",
    "KIND_LENGTH",
    "FIVE_CARD_KINDS",
    # finder
    "Finder",
    # errors
    "GameError",
    "NoSuchPlay",
    "MustOpenWithRequiredCard",
    "CannotPassWithControl",
    "WrongLength",
    "TooLow",
    "CardNotInHand",
    "GameOver",
    "StaleView",
    # rules
    "RuleEngine",
    # state
    "Phase",
    "GameState",
    "GameView",
    "N_PLAYERS",
]

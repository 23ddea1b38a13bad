"""
Evaluation Layer - 对局驱动与统计

Modules:
    arena: 对战竞技场
"""
from .arena import (
    run_game,
    MatchResult,
    TournamentResult,
    Arena,
)

__all__ = [
    "run_game",
    "MatchResult",
    "TournamentResult",
    "Arena",
]

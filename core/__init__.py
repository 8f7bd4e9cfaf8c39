"""
Core Layer - pure game logic

Modules:
    cards: cards, parsing and the seeded deck
    player: hand and score container
    config: rule configuration
    rules: rule engine (hand counting, pegging scoring, legality)
    strategy: heuristic opponent decisions
    state: game engine state machine
"""
from .cards import (
    Rank,
    Suit,
    Card,
    Deck,
    DeckExhaustedError,
    FULL_DECK,
    RANK_TO_STR,
    STR_TO_RANK,
    STR_TO_SUIT,
    str_to_cards,
    cards_to_str,
    sort_cards,
)

from .player import Player

from .config import GameConfig

from .rules import (
    RuleEngine,
    HandScore,
    PlayScore,
    FIFTEEN,
    THIRTY_ONE,
)

from .strategy import (
    select_discard,
    select_play,
    rank_plays,
)

from .state import (
    Phase,
    EventType,
    GameEvent,
    GameSnapshot,
    PlayedCard,
    CribbageGame,
    PLAY_PAUSES,
)

__all__ = [
    # cards
    "Rank",
    "Suit",
    "Card",
    "Deck",
    "DeckExhaustedError",
    "FULL_DECK",
    "RANK_TO_STR",
    "STR_TO_RANK",
    "STR_TO_SUIT",
    "str_to_cards",
    "cards_to_str",
    "sort_cards",
    # player
    "Player",
    # config
    "GameConfig",
    # rules
    "RuleEngine",
    "HandScore",
    "PlayScore",
    "FIFTEEN",
    "THIRTY_ONE",
    # strategy
    "select_discard",
    "select_play",
    "rank_plays",
    # state
    "Phase",
    "EventType",
    "GameEvent",
    "GameSnapshot",
    "PlayedCard",
    "CribbageGame",
    "PLAY_PAUSES",
]

"""
Card and deck definitions

Cribbage uses a standard 52-card deck:
- 13 ranks (A, 2-10, J, Q, K) in each of 4 suits
- point value (A=1, 2-10 face, J/Q/K=10) drives 15s and the pegging count
- order rank (A=1 .. K=13) drives sorting and runs only
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np


class Rank(IntEnum):
    """Card rank, valued by its order (A=1 .. K=13)"""
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13


class Suit(Enum):
    """Card suit"""
    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"


# Rank to display string
RANK_TO_STR: Dict[Rank, str] = {
    Rank.ACE: "A", Rank.TWO: "2", Rank.THREE: "3", Rank.FOUR: "4",
    Rank.FIVE: "5", Rank.SIX: "6", Rank.SEVEN: "7", Rank.EIGHT: "8",
    Rank.NINE: "9", Rank.TEN: "10", Rank.JACK: "J", Rank.QUEEN: "Q",
    Rank.KING: "K",
}

STR_TO_RANK: Dict[str, Rank] = {v: k for k, v in RANK_TO_STR.items()}
STR_TO_RANK["T"] = Rank.TEN

RANK_NAMES: Dict[Rank, str] = {
    Rank.ACE: "Ace", Rank.TWO: "Two", Rank.THREE: "Three", Rank.FOUR: "Four",
    Rank.FIVE: "Five", Rank.SIX: "Six", Rank.SEVEN: "Seven", Rank.EIGHT: "Eight",
    Rank.NINE: "Nine", Rank.TEN: "Ten", Rank.JACK: "Jack", Rank.QUEEN: "Queen",
    Rank.KING: "King",
}

SUIT_NAMES: Dict[Suit, str] = {
    Suit.HEARTS: "Hearts",
    Suit.DIAMONDS: "Diamonds",
    Suit.CLUBS: "Clubs",
    Suit.SPADES: "Spades",
}

# Letters accepted when parsing, alongside the suit symbols themselves
STR_TO_SUIT: Dict[str, Suit] = {
    "H": Suit.HEARTS, "D": Suit.DIAMONDS, "C": Suit.CLUBS, "S": Suit.SPADES,
    "♥": Suit.HEARTS, "♦": Suit.DIAMONDS, "♣": Suit.CLUBS, "♠": Suit.SPADES,
}


class DeckExhaustedError(RuntimeError):
    """Raised when a deck is asked for more cards than it holds"""


@dataclass(frozen=True)
class Card:
    """
    Immutable playing card

    Equality and hashing are by (rank, suit), so membership checks work on
    values rather than object identity.
    """
    rank: Rank
    suit: Suit

    @property
    def point_value(self) -> int:
        """Count value: A=1, 2-10 face value, J/Q/K=10"""
        return min(int(self.rank), 10)

    @property
    def order_rank(self) -> int:
        """Ordering value used for sorting and runs (A=1 .. K=13)"""
        return int(self.rank)

    @property
    def name(self) -> str:
        return f"{RANK_NAMES[self.rank]} of {SUIT_NAMES[self.suit]}"

    @property
    def symbol(self) -> str:
        return f"{RANK_TO_STR[self.rank]}{self.suit.value}"

    @property
    def is_red(self) -> bool:
        return self.suit in (Suit.HEARTS, Suit.DIAMONDS)

    @classmethod
    def from_str(cls, s: str) -> 'Card':
        """
        Parse a card such as "5H", "10♠", "JD" or "TC"

        Args:
            s: rank followed by a suit letter or symbol

        Returns:
            The card
        """
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s!r}")
        rank_str, suit_str = s[:-1], s[-1]
        if rank_str not in STR_TO_RANK or suit_str not in STR_TO_SUIT:
            raise ValueError(f"Invalid card string: {s!r}")
        return cls(STR_TO_RANK[rank_str], STR_TO_SUIT[suit_str])

    def __str__(self) -> str:
        return self.name


# Full 52-card deck, suit-major
FULL_DECK: Tuple[Card, ...] = tuple(
    Card(rank, suit) for suit in Suit for rank in Rank
)


def str_to_cards(s: str) -> List[Card]:
    """
    Parse a whitespace-separated card list

    Args:
        s: e.g. "5S 5C 5H JD"

    Returns:
        List of cards in the given order
    """
    return [Card.from_str(token) for token in s.split()]


def cards_to_str(cards: Iterable[Card]) -> str:
    """Format cards as symbols, e.g. "5♠ 5♣ J♦" """
    return " ".join(card.symbol for card in cards)


def sort_cards(cards: Iterable[Card]) -> List[Card]:
    """Sort by order rank, then suit order"""
    suit_order = {suit: i for i, suit in enumerate(Suit)}
    return sorted(cards, key=lambda c: (c.order_rank, suit_order[c.suit]))


class Deck:
    """
    A 52-card deck dealt from the top

    The shuffle is an explicit Fisher-Yates pass driven by a numpy
    Generator, so a seeded generator reproduces the same order.
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        cards: Optional[Sequence[Card]] = None,
        shuffle: bool = True,
    ):
        """
        Args:
            rng: random generator (a fresh unseeded one if None)
            cards: explicit card list, bottom first (defaults to FULL_DECK)
            shuffle: whether to shuffle on construction
        """
        self._rng = rng if rng is not None else np.random.default_rng()
        self.cards: List[Card] = list(cards) if cards is not None else list(FULL_DECK)
        if shuffle:
            self.shuffle()

    @classmethod
    def stacked(cls, cards: Sequence[Card]) -> 'Deck':
        """
        Build an unshuffled deck whose deal() order is exactly `cards`

        Args:
            cards: cards in the order they should be dealt

        Returns:
            Deck
        """
        return cls(cards=list(reversed(cards)), shuffle=False)

    def shuffle(self):
        """Uniform in-place Fisher-Yates shuffle"""
        cards = self.cards
        for i in range(len(cards) - 1, 0, -1):
            j = int(self._rng.integers(0, i + 1))
            cards[i], cards[j] = cards[j], cards[i]

    def deal(self) -> Card:
        """Remove and return the top card"""
        if not self.cards:
            raise DeckExhaustedError("Cannot deal from an empty deck")
        return self.cards.pop()

    def deal_many(self, n: int) -> List[Card]:
        """Deal n cards from the top"""
        if len(self.cards) < n:
            raise DeckExhaustedError(
                f"Cannot deal {n} cards from deck of {len(self.cards)}"
            )
        return [self.cards.pop() for _ in range(n)]

    def __len__(self) -> int:
        return len(self.cards)

"""
Player definition

A player's hand keeps every retained card for the whole round; cards played
during pegging are tracked separately in played_cards so the hand can still
be counted afterwards.
"""
from typing import List, Optional

from .cards import Card, sort_cards


class Player:
    """
    Hand container with played-card tracking and a cumulative score

    Attributes:
        name: display name
        is_computer: whether the seat is driven by the opponent strategy
        hand: cards currently held (indexable, display order)
        played_cards: cards played in the current round, subset of hand
        score: cumulative game score, never decreases
    """

    def __init__(self, name: str, is_computer: bool = False):
        self.name = name
        self.is_computer = is_computer
        self.hand: List[Card] = []
        self.played_cards: List[Card] = []
        self.score = 0

    def add_card(self, card: Card):
        self.hand.append(card)

    def remove_card(self, card: Card) -> Optional[Card]:
        """Take a card out of the hand (discarding). Returns None if absent."""
        if card not in self.hand:
            return None
        self.hand.remove(card)
        return card

    def has_played(self, card: Card) -> bool:
        return card in self.played_cards

    def play_card(self, card: Card) -> bool:
        """Mark a held, unplayed card as played"""
        if card not in self.hand or card in self.played_cards:
            return False
        self.played_cards.append(card)
        return True

    def unplayed_cards(self) -> List[Card]:
        """Cards still available for pegging, in hand order"""
        return [c for c in self.hand if c not in self.played_cards]

    def add_points(self, points: int) -> int:
        """
        Add points to the score

        Args:
            points: non-negative award

        Returns:
            New score
        """
        if points < 0:
            raise ValueError(f"Score can only increase, got {points}")
        self.score += points
        return self.score

    def reset_hand(self):
        self.hand = []
        self.played_cards = []

    def reset_score(self):
        self.score = 0

    def sort_hand(self):
        self.hand = sort_cards(self.hand)

    def __repr__(self) -> str:
        return f"Player({self.name!r}, score={self.score})"

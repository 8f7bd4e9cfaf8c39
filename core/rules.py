"""
Rule engine - hand counting, pegging scoring and play legality

All methods are pure functions with no state
"""
from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from typing import List, Sequence

from .cards import Card, Rank

FIFTEEN = 15
THIRTY_ONE = 31

# Same-rank streak length -> points while pegging
STREAK_POINTS = {2: 2, 3: 6, 4: 12}

# Longest trailing window checked for pegging runs
MAX_PEGGING_RUN = 5


@dataclass
class HandScore:
    """
    Breakdown of a counted hand or crib

    Attributes:
        fifteens: points from subsets summing to 15
        pairs: points from same-rank pairs
        runs: points from runs
        flush: points from a flush
        nobs: point for the Jack matching the cut suit
    """
    fifteens: int = 0
    pairs: int = 0
    runs: int = 0
    flush: int = 0
    nobs: int = 0

    @property
    def total(self) -> int:
        return self.fifteens + self.pairs + self.runs + self.flush + self.nobs

    def reasons(self) -> List[str]:
        """Narration fragments for the non-zero components"""
        parts = []
        if self.fifteens:
            parts.append(f"fifteens for {self.fifteens}")
        if self.pairs:
            parts.append(f"pairs for {self.pairs}")
        if self.runs:
            parts.append(f"runs for {self.runs}")
        if self.flush:
            parts.append(f"flush for {self.flush}")
        if self.nobs:
            parts.append(f"nobs for {self.nobs}")
        return parts


@dataclass
class PlayScore:
    """Points earned by a single pegging play"""
    points: int = 0
    reasons: List[str] = field(default_factory=list)

    def add(self, points: int, reason: str):
        self.points += points
        self.reasons.append(reason)


class RuleEngine:
    """
    Cribbage rule engine

    Scores hands, cribs and pegging plays, and answers legality questions.
    Every method is static and side-effect free.
    """

    @staticmethod
    def is_consecutive(values: Sequence[int]) -> bool:
        """
        Check whether sorted values step by exactly one

        Args:
            values: sorted integer list

        Returns:
            Whether every neighbour differs by one
        """
        for i in range(len(values) - 1):
            if values[i + 1] - values[i] != 1:
                return False
        return True

    @staticmethod
    def is_run(cards: Sequence[Card]) -> bool:
        """Whether the cards, in any order, form a run (duplicates break it)"""
        if len(cards) < 3:
            return False
        return RuleEngine.is_consecutive(sorted(c.order_rank for c in cards))

    # ------------------------------------------------------------------
    # Hand / crib counting
    # ------------------------------------------------------------------

    @staticmethod
    def count_fifteens(cards: Sequence[Card]) -> int:
        """2 points for every subset of two or more cards summing to 15"""
        points = 0
        for size in range(2, len(cards) + 1):
            for combo in combinations(cards, size):
                if sum(c.point_value for c in combo) == FIFTEEN:
                    points += 2
        return points

    @staticmethod
    def count_pairs(cards: Sequence[Card]) -> int:
        """2 points for every unordered same-rank pair"""
        return sum(2 for a, b in combinations(cards, 2) if a.rank == b.rank)

    @staticmethod
    def longest_run(cards: Sequence[Card]) -> int:
        """
        Length of the longest run, counted once

        Lengths are tried from the full set down to 3 and the search stops at
        the first length with a qualifying subset, so duplicated ranks never
        multiply the score.

        Returns:
            Run length, or 0 if there is no run
        """
        for length in range(len(cards), 2, -1):
            for combo in combinations(cards, length):
                if RuleEngine.is_run(combo):
                    return length
        return 0

    @staticmethod
    def count_runs_with_multiplicity(cards: Sequence[Card]) -> int:
        """
        Standard run counting: each distinct run scores its length

        A maximal block of consecutive ranks of length L scores L times the
        product of how many cards share each rank (4-4-5-6 is two runs of 3).
        """
        counts = Counter(c.order_rank for c in cards)
        unique = sorted(counts)
        points = 0
        i = 0
        while i < len(unique):
            j = i + 1
            while j < len(unique) and unique[j] == unique[j - 1] + 1:
                j += 1
            block = unique[i:j]
            if len(block) >= 3:
                multiplier = 1
                for value in block:
                    multiplier *= counts[value]
                points += len(block) * multiplier
            i = j
        return points

    @staticmethod
    def count_flush(hand: Sequence[Card], cut_card: Card, is_crib: bool) -> int:
        """
        Flush points

        A hand flush needs the 4 hand cards in one suit (4, or 5 with the cut);
        a crib only scores when all five cards match.
        """
        if not hand or any(c.suit != hand[0].suit for c in hand):
            return 0
        cut_matches = cut_card is not None and cut_card.suit == hand[0].suit
        if is_crib:
            return len(hand) + 1 if cut_matches else 0
        return len(hand) + (1 if cut_matches else 0)

    @staticmethod
    def count_nobs(hand: Sequence[Card], cut_card: Card) -> int:
        """1 point for a Jack in hand sharing the cut card's suit"""
        if cut_card is None:
            return 0
        return sum(1 for c in hand if c.rank == Rank.JACK and c.suit == cut_card.suit)

    @staticmethod
    def score_hand(
        hand: Sequence[Card],
        cut_card: Card,
        is_crib: bool = False,
        count_double_runs: bool = False,
    ) -> HandScore:
        """
        Count a hand or crib against the cut card

        Args:
            hand: the 4 hand (or crib) cards
            cut_card: shared starter card
            is_crib: crib flush rules apply
            count_double_runs: score every distinct run instead of the
                longest run once

        Returns:
            HandScore breakdown
        """
        cards = list(hand)
        if cut_card is not None:
            cards.append(cut_card)

        if count_double_runs:
            runs = RuleEngine.count_runs_with_multiplicity(cards)
        else:
            runs = RuleEngine.longest_run(cards)

        return HandScore(
            fifteens=RuleEngine.count_fifteens(cards),
            pairs=RuleEngine.count_pairs(cards),
            runs=runs,
            flush=RuleEngine.count_flush(list(hand), cut_card, is_crib),
            nobs=RuleEngine.count_nobs(hand, cut_card),
        )

    # ------------------------------------------------------------------
    # Pegging
    # ------------------------------------------------------------------

    @staticmethod
    def score_play(pile: Sequence[Card], count: int) -> PlayScore:
        """
        Score the card just added to the pegging pile

        Args:
            pile: current sequence, newest card last
            count: running count including the new card

        Returns:
            PlayScore with points and narration reasons
        """
        result = PlayScore()
        if not pile:
            return result

        if count == FIFTEEN:
            result.add(2, "fifteen for 2")
        if count == THIRTY_ONE:
            result.add(2, "thirty-one for 2")

        # Same-rank streak ending at the new card
        newest = pile[-1]
        streak = 1
        for card in reversed(pile[:-1]):
            if card.rank != newest.rank:
                break
            streak += 1
        if streak in STREAK_POINTS:
            label = {2: "pair", 3: "three of a kind", 4: "four of a kind"}[streak]
            result.add(STREAK_POINTS[streak], f"{label} for {STREAK_POINTS[streak]}")

        # Trailing-window runs, largest window first
        for length in range(min(len(pile), MAX_PEGGING_RUN), 2, -1):
            if RuleEngine.is_run(pile[-length:]):
                result.add(length, f"run of {length} for {length}")
                break

        return result

    @staticmethod
    def is_legal_play(card: Card, count: int, max_count: int = THIRTY_ONE) -> bool:
        """Whether the card fits under the count limit"""
        return count + card.point_value <= max_count

    @staticmethod
    def playable_cards(
        cards: Sequence[Card],
        count: int,
        max_count: int = THIRTY_ONE,
    ) -> List[Card]:
        """Cards that can legally be played on the current count"""
        return [c for c in cards if RuleEngine.is_legal_play(c, count, max_count)]

    @staticmethod
    def can_play(cards: Sequence[Card], count: int, max_count: int = THIRTY_ONE) -> bool:
        return any(RuleEngine.is_legal_play(c, count, max_count) for c in cards)

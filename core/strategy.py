"""
Heuristic opponent strategy

Two deterministic decision procedures used for the computer seat:
- select_discard: which 2 of 6 cards go to the crib
- select_play: which legal card to lay during pegging
"""
from itertools import combinations, permutations
from typing import List, Sequence, Tuple

from .cards import Card
from .rules import FIFTEEN, THIRTY_ONE

# Discard weights
FIFTEEN_PAIR_VALUE = 2
CRIB_WEIGHT = 1.5

# Play weights
SCORING_PLAY_BONUS = 20
FLEXIBILITY_BONUS = 2
DEAD_END_PENALTY = 10
OPPONENT_31_PENALTY = 15
OPPONENT_15_PENALTY = 8
OPPONENT_PAIR_PENALTY = 5
EARLY_HIGH_CARD_PENALTY = 3
EARLY_COUNT_FRACTION = 0.6
HIGH_CARD_VALUE = 10


def retained_hand_value(cards: Sequence[Card]) -> int:
    """
    Two points per ordered pair of kept cards summing to 15

    Each fifteen-pair is seen in both orders, so it adds 4 to the value.
    """
    return sum(
        FIFTEEN_PAIR_VALUE
        for a, b in permutations(cards, 2)
        if a.point_value + b.point_value == FIFTEEN
    )


def estimate_crib_score(discards: Sequence[Card]) -> int:
    """Rough crib contribution of a discard pair (fifteen and pair only)"""
    a, b = discards
    score = 0
    if a.point_value + b.point_value == FIFTEEN:
        score += 2
    if a.rank == b.rank:
        score += 2
    return score


def discard_cost(hand: Sequence[Card], i: int, j: int, is_dealer: bool) -> float:
    """
    Combined score for discarding hand[i] and hand[j]

    The crib estimate is added for the dealer and subtracted otherwise.
    The candidate with the lowest value is the one discarded.
    """
    discards = (hand[i], hand[j])
    kept = [c for k, c in enumerate(hand) if k not in (i, j)]
    crib = estimate_crib_score(discards)
    if is_dealer:
        return retained_hand_value(kept) + CRIB_WEIGHT * crib
    return retained_hand_value(kept) - CRIB_WEIGHT * crib


def select_discard(hand: Sequence[Card], is_dealer: bool) -> Tuple[int, int]:
    """
    Choose the two cards to send to the crib

    Args:
        hand: the 6 dealt cards
        is_dealer: whether the crib belongs to this player

    Returns:
        Indices (i, j) into hand, i < j
    """
    best = (0, 1)
    best_score = float("inf")
    for i, j in combinations(range(len(hand)), 2):
        score = discard_cost(hand, i, j, is_dealer)
        if score < best_score:
            best_score = score
            best = (i, j)
    return best


def evaluate_play(
    card: Card,
    remaining: Sequence[Card],
    count: int,
    opponent_remaining: Sequence[Card],
) -> float:
    """
    Heuristic value of playing `card` on `count`

    Args:
        card: candidate card
        remaining: player's unplayed cards (may include `card`)
        count: current pegging count
        opponent_remaining: opponent's unplayed cards

    Returns:
        Weighted score, higher is better
    """
    score = 0.0
    new_count = count + card.point_value
    makes_score = new_count in (FIFTEEN, THIRTY_ONE)

    if makes_score:
        score += SCORING_PLAY_BONUS

    # Flexibility: how many follow-ups would still be legal
    rest = [c for c in remaining if c != card]
    follow_ups = sum(1 for c in rest if new_count + c.point_value <= THIRTY_ONE)
    if follow_ups == 0 and new_count < THIRTY_ONE:
        score -= DEAD_END_PENALTY
    else:
        score += FLEXIBILITY_BONUS * follow_ups

    # Don't set up the opponent
    if any(new_count + c.point_value == THIRTY_ONE for c in opponent_remaining):
        score -= OPPONENT_31_PENALTY
    if any(new_count + c.point_value == FIFTEEN for c in opponent_remaining):
        score -= OPPONENT_15_PENALTY
    if any(c.rank == card.rank for c in opponent_remaining):
        score -= OPPONENT_PAIR_PENALTY

    # Keep high cards while the count is low
    if new_count / THIRTY_ONE < EARLY_COUNT_FRACTION and card.point_value >= HIGH_CARD_VALUE:
        score -= EARLY_HIGH_CARD_PENALTY

    if not makes_score:
        score -= card.point_value / 10

    return score


def select_play(
    playable: Sequence[Card],
    remaining: Sequence[Card],
    count: int,
    opponent_remaining: Sequence[Card],
) -> Card:
    """
    Choose the pegging card with the highest heuristic value

    Args:
        playable: legal candidates (non-empty)
        remaining: player's unplayed cards
        count: current pegging count
        opponent_remaining: opponent's unplayed cards

    Returns:
        The chosen card; the first candidate wins ties
    """
    if not playable:
        raise ValueError("select_play needs at least one playable card")
    if len(playable) == 1:
        return playable[0]

    best_card = playable[0]
    best_score = float("-inf")
    for card in playable:
        score = evaluate_play(card, remaining, count, opponent_remaining)
        if score > best_score:
            best_score = score
            best_card = card
    return best_card


def rank_plays(
    playable: Sequence[Card],
    remaining: Sequence[Card],
    count: int,
    opponent_remaining: Sequence[Card],
) -> List[Tuple[Card, float]]:
    """All candidates with their heuristic value, best first"""
    scored = [
        (card, evaluate_play(card, remaining, count, opponent_remaining))
        for card in playable
    ]
    return sorted(scored, key=lambda x: x[1], reverse=True)

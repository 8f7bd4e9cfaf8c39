"""Opponent strategy tests"""
from itertools import combinations

import pytest

from core.cards import Card, str_to_cards
from core import strategy
from core.strategy import (
    retained_hand_value,
    estimate_crib_score,
    discard_cost,
    select_discard,
    evaluate_play,
    select_play,
    rank_plays,
)


class TestDiscardHeuristics:
    """Discard heuristic component tests"""

    def test_retained_hand_value(self):
        # 5+10 and 5+K, each seen in both orders
        assert retained_hand_value(str_to_cards("5H 10S KD 2C")) == 8

    def test_retained_hand_value_ignores_triples(self):
        # 4+5+6 is not a two-card fifteen
        assert retained_hand_value(str_to_cards("4H 5S 6D 2C")) == 0

    def test_crib_estimate_fifteen(self):
        assert estimate_crib_score(str_to_cards("5H KS")) == 2

    def test_crib_estimate_pair(self):
        assert estimate_crib_score(str_to_cards("7H 7S")) == 2

    def test_crib_estimate_nothing(self):
        assert estimate_crib_score(str_to_cards("2H 9S")) == 0

    def test_cost_sign_depends_on_crib_owner(self):
        hand = str_to_cards("2C 3D 4S 6H 8C 9D")
        assert discard_cost(hand, 3, 5, is_dealer=True) == pytest.approx(3.0)
        assert discard_cost(hand, 3, 5, is_dealer=False) == pytest.approx(-3.0)


class TestSelectDiscard:
    """Discard selection tests"""

    HAND = str_to_cards("2C 3D 4S 6H 8C 9D")

    def test_returns_two_distinct_indices(self):
        i, j = select_discard(self.HAND, is_dealer=True)
        assert 0 <= i < j < len(self.HAND)

    def test_non_dealer_choice(self):
        assert select_discard(self.HAND, is_dealer=False) == (3, 5)

    def test_dealer_choice(self):
        assert select_discard(self.HAND, is_dealer=True) == (0, 3)

    def test_kept_fifteen_pairs_outweigh_crib_gift(self):
        # Giving away 5-Q keeps 6-9 (cost 4 - 3); splitting both pairs costs 0
        hand = str_to_cards("5S 8S 8C 6D 9S QS")
        assert discard_cost(hand, 0, 5, is_dealer=False) == pytest.approx(1.0)
        assert discard_cost(hand, 0, 3, is_dealer=False) == pytest.approx(0.0)
        assert select_discard(hand, is_dealer=False) == (0, 3)

    def test_minimises_cost(self):
        hand = str_to_cards("5H 5S JD QC 4H 6S")
        for is_dealer in (True, False):
            i, j = select_discard(hand, is_dealer)
            best = min(
                discard_cost(hand, a, b, is_dealer)
                for a, b in combinations(range(len(hand)), 2)
            )
            assert discard_cost(hand, i, j, is_dealer) == best

    def test_deterministic(self):
        hand = str_to_cards("AH 7S 8D KC 5H 5S")
        assert select_discard(hand, False) == select_discard(list(hand), False)


class TestEvaluatePlay:
    """Play heuristic tests"""

    def test_dead_end_penalty(self):
        card = Card.from_str("5H")
        remaining = str_to_cards("5H 9C")
        # 25 + 5 = 30, then 9 is unplayable
        value = evaluate_play(card, remaining, 25, [])
        assert value == pytest.approx(-10 - 0.5)

    def test_scoring_bonus(self):
        card = Card.from_str("5H")
        value = evaluate_play(card, str_to_cards("5H 2C"), 10, [])
        assert value == pytest.approx(20 + 2)

    def test_early_high_card_penalty(self):
        card = Card.from_str("KH")
        value = evaluate_play(card, str_to_cards("KH 2C"), 0, [])
        assert value == pytest.approx(2 - 3 - 1.0)


class TestSelectPlay:
    """Play selection tests"""

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            select_play([], [], 0, [])

    def test_single_candidate(self):
        card = Card.from_str("KH")
        assert select_play([card], [card], 21, str_to_cards("AH")) == card

    def test_prefers_fifteen(self):
        playable = str_to_cards("2C 5H")
        assert select_play(playable, playable, 10, []) == Card.from_str("5H")

    def test_avoids_setting_up_31(self):
        playable = str_to_cards("3C 4C")
        choice = select_play(playable, playable, 18, str_to_cards("KS"))
        assert choice == Card.from_str("4C")

    def test_deterministic(self):
        playable = str_to_cards("3C 4C 7H")
        opponent = str_to_cards("8S 9D")
        first = select_play(playable, playable, 5, opponent)
        for _ in range(5):
            assert select_play(playable, playable, 5, opponent) == first

    def test_rank_plays_sorted(self):
        playable = str_to_cards("2C 5H 9S")
        ranked = rank_plays(playable, playable, 10, [])
        values = [v for _, v in ranked]
        assert values == sorted(values, reverse=True)
        assert ranked[0][0] == select_play(playable, playable, 10, [])

    def test_weights_exposed(self):
        assert strategy.SCORING_PLAY_BONUS == 20
        assert strategy.CRIB_WEIGHT == 1.5

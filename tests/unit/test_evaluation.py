"""Evaluation layer tests"""
import pytest
import numpy as np

from core.cards import Card, str_to_cards
from core.config import GameConfig


class StubGame:
    """Minimal stand-in exposing what FixedPolicyAgent reads"""

    def __init__(self, playable, count):
        self._playable = str_to_cards(playable)
        self.current_count = count

    def playable_cards(self, player):
        return list(self._playable)


class TestFixedPolicyAgent:
    """FixedPolicyAgent tests"""

    def test_discards_first_two(self):
        from evaluation import FixedPolicyAgent

        agent = FixedPolicyAgent()
        hand = str_to_cards("KH 5S 5D 5C JH 2S")
        assert agent.select_discard(hand, True) == (0, 1)
        assert agent.select_discard(hand, False) == (0, 1)

    def test_prefers_thirty_one(self):
        from evaluation import FixedPolicyAgent

        agent = FixedPolicyAgent()
        card = agent.select_play(StubGame("AH 5H KS", 21), None)
        assert card == Card.from_str("KS")

    def test_then_fifteen(self):
        from evaluation import FixedPolicyAgent

        agent = FixedPolicyAgent()
        card = agent.select_play(StubGame("2C 5H", 10), None)
        assert card == Card.from_str("5H")

    def test_then_lowest(self):
        from evaluation import FixedPolicyAgent

        agent = FixedPolicyAgent()
        card = agent.select_play(StubGame("9C 2C 7S", 3), None)
        assert card == Card.from_str("2C")

    def test_go_when_stuck(self):
        from evaluation import FixedPolicyAgent

        agent = FixedPolicyAgent()
        assert agent.select_play(StubGame("", 30), None) is None


class TestRandomAgent:
    """RandomAgent tests"""

    def test_discard(self):
        from evaluation import RandomAgent

        agent = RandomAgent(rng=np.random.default_rng(0))
        for _ in range(20):
            i, j = agent.select_discard(str_to_cards("AH 2H 3H 4H 5H 6H"), False)
            assert 0 <= i < j < 6
            assert isinstance(i, int)

    def test_play_is_legal(self):
        from evaluation import RandomAgent

        agent = RandomAgent(rng=np.random.default_rng(0))
        game = StubGame("9C 2C 7S", 3)
        for _ in range(20):
            assert agent.select_play(game, None) in game.playable_cards(None)

    def test_go_when_stuck(self):
        from evaluation import RandomAgent

        agent = RandomAgent()
        assert agent.select_play(StubGame("", 30), None) is None


class TestHeuristicAgent:
    """HeuristicAgent tests"""

    def test_play_is_legal(self):
        from core.state import CribbageGame
        from evaluation import HeuristicAgent

        agent = HeuristicAgent()
        game = CribbageGame(seed=4)
        game.start_game(game.computer)
        game.discard_to_crib(agent.select_discard(game.player.hand, False))
        card = agent.select_play(game, game.player)
        assert card in game.playable_cards(game.player)
        assert game.play_card(game.player, card)

    def test_discard_matches_strategy(self):
        from core.strategy import select_discard
        from evaluation import HeuristicAgent

        hand = str_to_cards("2C 3D 4S 6H 8C 9D")
        assert HeuristicAgent().select_discard(hand, True) == select_discard(hand, True)


class TestSimulationConfig:
    """SimulationConfig tests"""

    def test_defaults(self):
        from evaluation import SimulationConfig

        config = SimulationConfig()
        assert config.n_games == 100
        assert config.first_dealer == "computer"
        assert config.game.winning_score == 121
        assert not config.game.record_events

    def test_invalid_first_dealer(self):
        from evaluation import SimulationConfig

        with pytest.raises(ValueError):
            SimulationConfig(first_dealer="nobody")

    def test_seat_names_must_differ(self):
        from evaluation import SimulationConfig

        with pytest.raises(ValueError):
            SimulationConfig(player_name="Same", computer_name="Same")

    def test_from_dict(self):
        from evaluation import SimulationConfig

        config = SimulationConfig.from_dict({
            "n_games": 7,
            "seed": 3,
            "unknown": True,
            "game": {"count_double_runs": True, "bogus": 1},
        })
        assert config.n_games == 7
        assert config.seed == 3
        assert isinstance(config.game, GameConfig)
        assert config.game.count_double_runs

    def test_game_config_from_dict(self):
        config = GameConfig.from_dict({"winning_score": 61, "extra": 0})
        assert config.winning_score == 61
        assert config.kept_cards == 4


class TestMetrics:
    """Metrics tests"""

    def records(self):
        from evaluation import GameRecord

        return [
            GameRecord(1, 121, 100, "Player", "Computer", rounds=9),
            GameRecord(2, 90, 121, "Computer", "Player", rounds=8),
            GameRecord(3, 121, 80, "Player", "Computer", rounds=10),
        ]

    def test_summarize(self):
        from evaluation import summarize

        summary = summarize(self.records())
        assert summary.total_games == 3
        assert summary.player_wins == 2
        assert summary.computer_wins == 1
        assert summary.win_rate_percent == pytest.approx(66.7)
        assert summary.computer_win_rate_percent == pytest.approx(33.3)
        assert summary.avg_player_score == pytest.approx(110.7)
        assert summary.avg_computer_score == pytest.approx(100.3)
        assert summary.avg_rounds == pytest.approx(9.0)
        assert summary.margin["mean"] == pytest.approx(-31 / 3)

    def test_summarize_empty(self):
        from evaluation import summarize

        summary = summarize([])
        assert summary.total_games == 0
        assert summary.win_rate_percent == 0.0
        assert summary.avg_player_score == 0.0

    def test_to_dict(self):
        from evaluation import summarize

        records = self.records()
        data = summarize(records).to_dict()
        assert data["total_games"] == 3
        assert records[0].to_dict()["winner_name"] == "Player"

    def test_running_stats(self):
        from evaluation import RunningStats

        stats = RunningStats()
        for x in [1.0, 2.0, 3.0, 4.0]:
            stats.update(x)
        assert stats.mean == pytest.approx(2.5)
        assert stats.variance == pytest.approx(5.0 / 3.0)
        assert stats.std == pytest.approx(np.sqrt(5.0 / 3.0))
        assert stats.to_dict()["min"] == 1.0
        assert stats.to_dict()["max"] == 4.0


class TestGameSimulator:
    """GameSimulator tests"""

    def test_run(self):
        from evaluation import GameSimulator, SimulationConfig

        simulator = GameSimulator(SimulationConfig(n_games=3, seed=1))
        summary = simulator.run()
        assert summary.total_games == 3
        assert summary.player_wins + summary.computer_wins == 3

        for record in simulator.get_results():
            assert max(record.player_score, record.computer_score) >= 121
            assert min(record.player_score, record.computer_score) < 121
            if record.winner_name == "Player":
                assert record.player_score >= 121
            else:
                assert record.computer_score >= 121

    def test_dealer_alternates(self):
        from evaluation import GameSimulator, SimulationConfig

        simulator = GameSimulator(SimulationConfig(n_games=4, seed=2))
        simulator.run()
        dealers = [r.dealer_name for r in simulator.get_results()]
        assert dealers == ["Computer", "Player", "Computer", "Player"]

    def test_first_dealer_player(self):
        from evaluation import GameSimulator, SimulationConfig

        config = SimulationConfig(n_games=2, seed=2, first_dealer="player", alternate_dealer=False)
        simulator = GameSimulator(config)
        simulator.run()
        assert [r.dealer_name for r in simulator.get_results()] == ["Player", "Player"]

    def test_round_limit(self):
        from evaluation import GameSimulator, SimulationConfig

        simulator = GameSimulator(SimulationConfig(n_games=2, seed=3, max_rounds=1))
        simulator.run()
        for record in simulator.get_results():
            assert record.rounds == 1
            if record.player_score >= record.computer_score:
                assert record.winner_name == "Player"
            else:
                assert record.winner_name == "Computer"

    def test_game_numbers(self):
        from evaluation import GameSimulator, SimulationConfig

        simulator = GameSimulator(SimulationConfig(n_games=3, seed=0))
        simulator.run()
        assert [r.game_number for r in simulator.get_results()] == [1, 2, 3]

    def test_zero_games(self):
        from evaluation import GameSimulator, SimulationConfig

        summary = GameSimulator(SimulationConfig(n_games=0, seed=0)).run()
        assert summary.total_games == 0

    def test_custom_seat_names(self, caplog):
        from evaluation import GameSimulator, SimulationConfig

        config = SimulationConfig(
            n_games=4, seed=5, log_every=2, player_name="Ann", computer_name="Bot",
        )
        simulator = GameSimulator(config)
        with caplog.at_level("INFO", logger="evaluation.evaluator"):
            summary = simulator.run()

        records = simulator.get_results()
        assert {r.dealer_name for r in records} == {"Ann", "Bot"}
        assert summary.player_wins == sum(1 for r in records if r.winner_name == "Ann")
        assert summary.computer_wins == sum(1 for r in records if r.winner_name == "Bot")
        assert summary.player_wins + summary.computer_wins == 4

        progress = [r.getMessage() for r in caplog.records if "win rate" in r.getMessage()]
        assert len(progress) == 2
        bot_wins = sum(1 for r in records if r.winner_name == "Bot")
        assert progress[-1] == f"Game 4/4, Bot win rate: {bot_wins / 4:.2%}"

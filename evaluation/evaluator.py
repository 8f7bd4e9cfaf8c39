"""
Agents and the game simulator

Drives complete games through the engine's public operations with an agent
on each seat and collects per-game results
"""
from typing import List, Optional, Sequence, Tuple
import logging

import numpy as np

from core.cards import Card
from core.rules import FIFTEEN, THIRTY_ONE
from core.state import CribbageGame, Phase, PLAY_PAUSES
from core.player import Player
from core import strategy

from .config import SimulationConfig
from .metrics import GameRecord, SimulationSummary, summarize

logger = logging.getLogger(__name__)


class Agent:
    """Agent base class"""

    def __init__(self, name: str = "agent"):
        self.name = name

    def select_discard(self, hand: Sequence[Card], is_dealer: bool) -> Tuple[int, int]:
        """Pick two indices into hand to send to the crib"""
        raise NotImplementedError

    def select_play(self, game: CribbageGame, player: Player) -> Optional[Card]:
        """Pick a legal card to play, or None to say Go"""
        raise NotImplementedError


class RandomAgent(Agent):
    """Random agent"""

    def __init__(self, name: str = "random", rng: Optional[np.random.Generator] = None):
        super().__init__(name)
        self.rng = rng if rng is not None else np.random.default_rng()

    def select_discard(self, hand: Sequence[Card], is_dealer: bool) -> Tuple[int, int]:
        i, j = self.rng.choice(len(hand), size=2, replace=False)
        return (int(min(i, j)), int(max(i, j)))

    def select_play(self, game: CribbageGame, player: Player) -> Optional[Card]:
        playable = game.playable_cards(player)
        if not playable:
            return None
        return playable[int(self.rng.integers(len(playable)))]


class FixedPolicyAgent(Agent):
    """
    Fixed rule agent

    Discards the first two cards; pegs to 31 if possible, else to 15,
    else lays the lowest-value card.
    """

    def __init__(self, name: str = "fixed"):
        super().__init__(name)

    def select_discard(self, hand: Sequence[Card], is_dealer: bool) -> Tuple[int, int]:
        return (0, 1)

    def select_play(self, game: CribbageGame, player: Player) -> Optional[Card]:
        playable = game.playable_cards(player)
        if not playable:
            return None

        count = game.current_count
        for target in (THIRTY_ONE, FIFTEEN):
            for card in playable:
                if count + card.point_value == target:
                    return card

        lowest = playable[0]
        for card in playable[1:]:
            if card.point_value < lowest.point_value:
                lowest = card
        return lowest


class HeuristicAgent(Agent):
    """Heuristic agent backed by core.strategy"""

    def __init__(self, name: str = "heuristic"):
        super().__init__(name)

    def select_discard(self, hand: Sequence[Card], is_dealer: bool) -> Tuple[int, int]:
        return strategy.select_discard(hand, is_dealer)

    def select_play(self, game: CribbageGame, player: Player) -> Optional[Card]:
        playable = game.playable_cards(player)
        if not playable:
            return None
        return strategy.select_play(
            playable,
            player.unplayed_cards(),
            game.current_count,
            game.opponent_of(player).unplayed_cards(),
        )


class GameSimulator:
    """
    Game simulator

    Plays config.n_games complete games with no external input. Each game
    gets its own engine and its own generator spawned from the master seed,
    so a fixed seed reproduces every deal.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        player_agent: Optional[Agent] = None,
        computer_agent: Optional[Agent] = None,
    ):
        self.config = config or SimulationConfig()
        self.player_agent = player_agent or FixedPolicyAgent("player")
        self.computer_agent = computer_agent or HeuristicAgent("computer")
        self.results: List[GameRecord] = []

    def game_seeds(self) -> List[np.random.SeedSequence]:
        """One independent seed sequence per game"""
        return np.random.SeedSequence(self.config.seed).spawn(self.config.n_games)

    def opening_dealer_is_computer(self, game_index: int) -> bool:
        computer_first = self.config.first_dealer == "computer"
        if self.config.alternate_dealer and game_index % 2 == 1:
            return not computer_first
        return computer_first

    def play_game(self, game_index: int, seed: np.random.SeedSequence) -> GameRecord:
        """
        Play one game to completion

        Args:
            game_index: zero-based game index
            seed: seed sequence for this game's decks

        Returns:
            GameRecord
        """
        game = CribbageGame(
            config=self.config.game,
            rng=np.random.default_rng(seed),
            discard_policy=self.computer_agent.select_discard,
            player_name=self.config.player_name,
            computer_name=self.config.computer_name,
        )
        if self.opening_dealer_is_computer(game_index):
            opening_dealer = game.computer
        else:
            opening_dealer = game.player
        game.start_game(opening_dealer)

        forced = 0
        rounds = 0
        while not game.is_over and rounds < self.config.max_rounds:
            rounds += 1
            if self._play_round(game):
                forced += 1
            if game.is_over or rounds >= self.config.max_rounds:
                break
            game.continue_after_pause()

        if game.winner is not None:
            winner = game.winner
        else:
            logger.warning(
                "Game %d hit the %d-round limit, deciding by score",
                game_index + 1, self.config.max_rounds,
            )
            winner = game.player if game.player.score >= game.computer.score else game.computer

        return GameRecord(
            game_number=game_index + 1,
            player_score=game.player.score,
            computer_score=game.computer.score,
            winner_name=winner.name,
            dealer_name=opening_dealer.name,
            rounds=rounds,
            forced_completions=forced,
        )

    def _play_round(self, game: CribbageGame) -> bool:
        """
        Discard, peg and count one round

        Returns:
            True if the pegging loop hit the iteration ceiling
        """
        if game.state == Phase.DISCARD:
            indices = self.player_agent.select_discard(
                list(game.player.hand), game.dealer is game.player
            )
            if not game.discard_to_crib(indices):
                raise RuntimeError(f"Agent {self.player_agent.name} returned invalid discard {indices}")

        plays = 0
        while game.state in (Phase.PLAY,) + PLAY_PAUSES and plays < self.config.max_plays_per_round:
            plays += 1
            if game.state in PLAY_PAUSES:
                game.continue_after_pause()
                continue

            seat = game.current_turn
            agent = self.computer_agent if seat is game.computer else self.player_agent
            card = agent.select_play(game, seat)
            moved = game.say_go() if card is None else game.play_card(seat, card)
            if not moved:
                logger.warning("Agent %s made an illegal move, ending play", agent.name)
                break

        forced = False
        if game.state in (Phase.PLAY,) + PLAY_PAUSES:
            forced = True
            game.force_end_play()

        if game.state == Phase.PAUSE_BEFORE_COUNT:
            game.count_hands()
        return forced

    def _log_progress(self, done: int):
        if self.config.log_every and done % self.config.log_every == 0:
            computer_wins = sum(1 for r in self.results if r.winner_name == self.config.computer_name)
            logger.info(
                f"Game {done}/{self.config.n_games}, "
                f"{self.config.computer_name} win rate: {computer_wins / len(self.results):.2%}"
            )

    def run(self) -> SimulationSummary:
        """
        Play every game sequentially

        Returns:
            Aggregate statistics (records in self.results)
        """
        self.results = []
        for game_index, seed in enumerate(self.game_seeds()):
            self.results.append(self.play_game(game_index, seed))
            self._log_progress(game_index + 1)
        return self.get_summary()

    def get_results(self) -> List[GameRecord]:
        return list(self.results)

    def get_summary(self) -> SimulationSummary:
        return summarize(self.results, self.config.player_name, self.config.computer_name)

"""
Game engine - the Cribbage turn state machine

Holds all mutable round state and moves through the phases
CUT_FOR_DEAL -> DISCARD -> PLAY <-> {PAUSE_AT_31, PAUSE_ON_GO}
-> PAUSE_BEFORE_COUNT -> ROUND_OVER -> DISCARD ... | GAME_OVER.

Every scoring or phase-transition event is recorded as a GameEvent on the
engine and forwarded to registered message listeners in emission order.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple
import logging

import numpy as np

from .cards import Card, Deck, Rank
from .config import GameConfig
from .player import Player
from .rules import HandScore, RuleEngine
from .strategy import select_discard, select_play

logger = logging.getLogger(__name__)


class Phase(Enum):
    """Engine state"""
    CUT_FOR_DEAL = "cut_for_deal"
    DISCARD = "discard"
    PLAY = "play"
    PAUSE_AT_31 = "pause_at_31"
    PAUSE_ON_GO = "pause_on_go"
    PAUSE_BEFORE_COUNT = "pause_before_count"
    ROUND_OVER = "round_over"
    GAME_OVER = "game_over"


# Pauses inside the play phase, resumed by continue_after_pause()
PLAY_PAUSES: Tuple[Phase, ...] = (Phase.PAUSE_AT_31, Phase.PAUSE_ON_GO)


class EventType(Enum):
    """Kind of narration event"""
    INFO = "info"
    CUT = "cut"
    DEAL = "deal"
    DISCARD = "discard"
    CUT_CARD = "cut_card"
    PLAY = "play"
    SCORE = "score"
    GO = "go"
    RESET = "reset"
    COUNT = "count"
    ROUND_OVER = "round_over"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameEvent:
    """
    One narration event

    Attributes:
        kind: event type
        message: human-readable narration
        player: name of the player concerned, if any
        points: points awarded by this event
    """
    kind: EventType
    message: str
    player: Optional[str] = None
    points: int = 0


@dataclass(frozen=True)
class PlayedCard:
    """A card on the pegging pile and who laid it"""
    card: Card
    player: Player


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable view of the engine's read accessors"""
    phase: Phase
    dealer: Optional[str]
    current_turn: Optional[str]
    current_count: int
    crib: Tuple[Card, ...]
    cut_card: Optional[Card]
    played_pile: Tuple[Tuple[Card, str], ...]
    hands: Tuple[Tuple[str, Tuple[Card, ...]], ...]
    played_cards: Tuple[Tuple[str, Tuple[Card, ...]], ...]
    scores: Tuple[Tuple[str, int], ...]
    winner: Optional[str] = None

    def get_hand(self, name: str) -> Tuple[Card, ...]:
        for n, cards in self.hands:
            if n == name:
                return cards
        return ()

    def get_score(self, name: str) -> int:
        for n, score in self.scores:
            if n == name:
                return score
        return 0


# (hand, is_dealer) -> two indices into hand
DiscardPolicy = Callable[[Sequence[Card], bool], Tuple[int, int]]
# (playable, remaining, count, opponent_remaining) -> card
PlayPolicy = Callable[[Sequence[Card], Sequence[Card], int, Sequence[Card]], Card]
MessageListener = Callable[[str], None]


class CribbageGame:
    """
    Two-player Cribbage engine (human seat vs computer seat)

    Misuse by the driver (wrong phase, wrong turn, illegal card) is a logged
    no-op that returns False. Win detection runs after every award and moves
    straight to GAME_OVER, which is terminal.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
        deck_factory: Optional[Callable[[], Deck]] = None,
        discard_policy: DiscardPolicy = select_discard,
        play_policy: PlayPolicy = select_play,
        player_name: str = "Player",
        computer_name: str = "Computer",
    ):
        """
        Args:
            config: rule configuration
            rng: random generator shared by every deck this engine creates
            seed: seed for a new generator when rng is not given
            deck_factory: builds the deck for each cut and round
                (defaults to a shuffled Deck on the engine's generator)
            discard_policy: computer seat discard decision
            play_policy: computer seat pegging decision
            player_name: human seat name
            computer_name: computer seat name
        """
        self.config = config or GameConfig()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self._deck_factory = deck_factory or (lambda: Deck(rng=self.rng))
        self._discard_policy = discard_policy
        self._play_policy = play_policy

        self.player = Player(player_name, is_computer=False)
        self.computer = Player(computer_name, is_computer=True)

        self.deck: Optional[Deck] = None
        self.crib: List[Card] = []
        self.cut_card: Optional[Card] = None
        self.dealer: Optional[Player] = None
        self.current_turn: Optional[Player] = None
        self.played_pile: List[PlayedCard] = []
        self.current_count = 0
        self.state = Phase.CUT_FOR_DEAL
        self.winner: Optional[Player] = None
        self.round_number = 0
        self.hand_counts: List[Tuple[str, str, HandScore]] = []

        self.events: List[GameEvent] = []
        self._listeners: List[MessageListener] = []

    # ------------------------------------------------------------------
    # Narration
    # ------------------------------------------------------------------

    def add_message_listener(self, callback: MessageListener):
        """Register a callback invoked with each narration message"""
        self._listeners.append(callback)

    def drain_events(self) -> List[GameEvent]:
        """Return the recorded events and clear the log"""
        events, self.events = self.events, []
        return events

    def _emit(
        self,
        kind: EventType,
        message: str,
        player: Optional[Player] = None,
        points: int = 0,
    ):
        if self.config.record_events:
            self.events.append(GameEvent(
                kind=kind,
                message=message,
                player=player.name if player is not None else None,
                points=points,
            ))
        for callback in self._listeners:
            callback(message)

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def players(self) -> Tuple[Player, Player]:
        return (self.player, self.computer)

    @property
    def non_dealer(self) -> Optional[Player]:
        if self.dealer is None:
            return None
        return self.opponent_of(self.dealer)

    @property
    def is_over(self) -> bool:
        return self.state == Phase.GAME_OVER

    def opponent_of(self, player: Player) -> Player:
        return self.computer if player is self.player else self.player

    def playable_cards(self, player: Player) -> List[Card]:
        """Unplayed cards the player could lay on the current count"""
        return RuleEngine.playable_cards(
            player.unplayed_cards(), self.current_count, self.config.max_count
        )

    def can_play(self, player: Player) -> bool:
        return RuleEngine.can_play(
            player.unplayed_cards(), self.current_count, self.config.max_count
        )

    def is_play_complete(self) -> bool:
        kept = self.config.kept_cards
        return all(len(p.played_cards) >= kept for p in self.players)

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            phase=self.state,
            dealer=self.dealer.name if self.dealer else None,
            current_turn=self.current_turn.name if self.current_turn else None,
            current_count=self.current_count,
            crib=tuple(self.crib),
            cut_card=self.cut_card,
            played_pile=tuple((p.card, p.player.name) for p in self.played_pile),
            hands=tuple((p.name, tuple(p.hand)) for p in self.players),
            played_cards=tuple((p.name, tuple(p.played_cards)) for p in self.players),
            scores=tuple((p.name, p.score) for p in self.players),
            winner=self.winner.name if self.winner else None,
        )

    # ------------------------------------------------------------------
    # Game setup
    # ------------------------------------------------------------------

    def start_new_game(self):
        """Reset scores and return to the cut for deal"""
        for p in self.players:
            p.reset_score()
            p.reset_hand()
        self._reset_round_state()
        self.dealer = None
        self.current_turn = None
        self.winner = None
        self.round_number = 0
        self.state = Phase.CUT_FOR_DEAL
        self._emit(EventType.INFO, "New game started. Cut for deal to begin.")

    def cut_for_deal(self) -> Optional[Player]:
        """
        Each side cuts from an independent fresh deck; the lower card deals

        Returns:
            The dealer, or None on a tie (cut again) or in the wrong phase
        """
        if self.state != Phase.CUT_FOR_DEAL:
            logger.debug("cut_for_deal ignored in phase %s", self.state.value)
            return None

        player_cut = self._deck_factory().deal()
        computer_cut = self._deck_factory().deal()
        self._emit(EventType.CUT, f"{self.player.name} cut: {player_cut}", self.player)
        self._emit(EventType.CUT, f"{self.computer.name} cut: {computer_cut}", self.computer)

        if player_cut.point_value < computer_cut.point_value:
            self.dealer = self.player
        elif computer_cut.point_value < player_cut.point_value:
            self.dealer = self.computer
        else:
            self._emit(EventType.CUT, "Tie! Cut again.")
            return None

        self._emit(EventType.CUT, f"{self.dealer.name} deals.", self.dealer)
        self.start_round()
        return self.dealer

    def start_game(self, dealer: Player) -> bool:
        """
        Start a game with a fixed dealer, skipping the cut

        Args:
            dealer: self.player or self.computer

        Returns:
            Whether the first round was dealt
        """
        if dealer is not self.player and dealer is not self.computer:
            raise ValueError("Dealer must be one of this game's players")
        self.dealer = dealer
        self.winner = None
        self.state = Phase.CUT_FOR_DEAL
        return self.start_round()

    def start_round(self) -> bool:
        """Shuffle a fresh deck and deal a new hand to both players"""
        if self.state not in (Phase.CUT_FOR_DEAL, Phase.ROUND_OVER) or self.dealer is None:
            logger.debug("start_round ignored in phase %s", self.state.value)
            return False

        for p in self.players:
            p.reset_hand()
        self._reset_round_state()
        self.deck = self._deck_factory()
        self.round_number += 1

        # Non-dealer receives the first card
        first = self.opponent_of(self.dealer)
        second = self.dealer
        for _ in range(self.config.hand_size):
            first.add_card(self.deck.deal())
            second.add_card(self.deck.deal())

        self.state = Phase.DISCARD
        self._emit(
            EventType.DEAL,
            f"Deal complete. Select {self.config.discard_count} cards to discard to the crib.",
        )
        self._emit(EventType.DEAL, f"{self.dealer.name}'s crib.", self.dealer)
        return True

    def _reset_round_state(self):
        self.crib = []
        self.cut_card = None
        self.played_pile = []
        self.current_count = 0
        self.hand_counts = []

    # ------------------------------------------------------------------
    # Discard
    # ------------------------------------------------------------------

    def _valid_discard(self, hand: Sequence[Card], indices: Sequence[int]) -> bool:
        if len(indices) != self.config.discard_count:
            return False
        if len(set(indices)) != len(indices):
            return False
        return all(isinstance(i, (int, np.integer)) and 0 <= i < len(hand) for i in indices)

    def discard_to_crib(self, player_indices: Sequence[int]) -> bool:
        """
        Send the human's chosen cards and the computer's choice to the crib,
        then cut the starter card

        Args:
            player_indices: indices into self.player.hand

        Returns:
            Whether the discard was applied
        """
        if self.state != Phase.DISCARD:
            logger.debug("discard_to_crib ignored in phase %s", self.state.value)
            return False
        if not self._valid_discard(self.player.hand, player_indices):
            logger.debug("discard_to_crib rejected indices %s", list(player_indices))
            return False

        computer_indices = self._discard_policy(
            list(self.computer.hand), self.dealer is self.computer
        )
        if not self._valid_discard(self.computer.hand, computer_indices):
            raise ValueError(f"Discard policy returned invalid indices {computer_indices}")

        for seat, indices in ((self.player, player_indices), (self.computer, computer_indices)):
            discards = [seat.hand[i] for i in sorted(indices, reverse=True)]
            for card in discards:
                seat.remove_card(card)
                self.crib.append(card)
        self._emit(EventType.DISCARD, "Both players discarded to the crib.")

        self.cut_card = self.deck.deal()
        self._emit(EventType.CUT_CARD, f"Cut card: {self.cut_card}")

        if self.cut_card.rank == Rank.JACK:
            if self._award(self.dealer, 2, "his heels"):
                return True

        self.state = Phase.PLAY
        self.current_turn = self.non_dealer
        self._emit(EventType.INFO, f"{self.current_turn.name} plays first.", self.current_turn)
        return True

    # ------------------------------------------------------------------
    # Pegging
    # ------------------------------------------------------------------

    def play_card(self, player: Player, card: Card) -> bool:
        """
        Lay a card on the pegging pile

        Args:
            player: the player to move
            card: a card from that player's unplayed hand

        Returns:
            Whether the play was legal and applied
        """
        if self.state != Phase.PLAY:
            logger.debug("play_card ignored in phase %s", self.state.value)
            return False
        if self.current_turn is not player:
            logger.debug("play_card rejected: not %s's turn", player.name)
            return False
        if card not in player.hand or player.has_played(card):
            logger.debug("play_card rejected: %s not available to %s", card, player.name)
            return False
        if not RuleEngine.is_legal_play(card, self.current_count, self.config.max_count):
            logger.debug("play_card rejected: %s would exceed %d", card, self.config.max_count)
            return False

        player.play_card(card)
        self.played_pile.append(PlayedCard(card, player))
        self.current_count += card.point_value
        self._emit(
            EventType.PLAY,
            f"{player.name} plays {card} (count: {self.current_count})",
            player,
        )

        result = RuleEngine.score_play([p.card for p in self.played_pile], self.current_count)
        if result.points > 0:
            if self._award(player, result.points, ", ".join(result.reasons)):
                return True

        if self.current_count == self.config.max_count:
            self._reset_count()
            if self.is_play_complete():
                self._end_play()
                return True
            self.current_turn = self._next_leader(player)
            self.state = Phase.PAUSE_AT_31
            self._emit(EventType.RESET, "Count reset. Continue to resume play.")
            return True

        if self.is_play_complete():
            if self.current_count > 0:
                if self._award(player, 1, "last card"):
                    return True
            self._reset_count()
            self._end_play()
            return True

        self._advance_turn(player)
        return True

    def say_go(self) -> bool:
        """
        The player to move declares Go

        Returns:
            False if that player could still play (or wrong phase)
        """
        if self.state != Phase.PLAY:
            logger.debug("say_go ignored in phase %s", self.state.value)
            return False
        current = self.current_turn
        if self.can_play(current):
            logger.debug("say_go rejected: %s can still play", current.name)
            return False

        self._emit(EventType.GO, f"{current.name} says Go.", current)
        opponent = self.opponent_of(current)
        if self.can_play(opponent):
            self.current_turn = opponent
            return True

        last_player = self.played_pile[-1].player if self.played_pile else None
        self._resolve_go(last_player)
        return True

    def computer_play(self) -> bool:
        """Make the computer's pegging move: play its chosen card or say Go"""
        if self.state != Phase.PLAY or self.current_turn is not self.computer:
            return False
        playable = self.playable_cards(self.computer)
        if not playable:
            return self.say_go()
        card = self._play_policy(
            playable,
            self.computer.unplayed_cards(),
            self.current_count,
            self.player.unplayed_cards(),
        )
        return self.play_card(self.computer, card)

    def continue_after_pause(self) -> bool:
        """
        Resume from a pause state

        PAUSE_AT_31 / PAUSE_ON_GO resume play, PAUSE_BEFORE_COUNT counts the
        hands and ROUND_OVER deals the next round.
        """
        if self.state in PLAY_PAUSES:
            self.state = Phase.PLAY
            current = self.current_turn
            if not self.can_play(current) and self.can_play(self.opponent_of(current)):
                self.current_turn = self.opponent_of(current)
            self._emit(EventType.INFO, f"{self.current_turn.name} leads.", self.current_turn)
            return True
        if self.state == Phase.PAUSE_BEFORE_COUNT:
            return self.count_hands()
        if self.state == Phase.ROUND_OVER:
            return self.start_round()
        logger.debug("continue_after_pause ignored in phase %s", self.state.value)
        return False

    def force_end_play(self) -> bool:
        """Mark every unplayed card as played and move to counting"""
        if self.state not in (Phase.PLAY,) + PLAY_PAUSES:
            return False
        for p in self.players:
            for card in p.unplayed_cards():
                p.play_card(card)
        self._reset_count()
        self._emit(EventType.INFO, "Play phase force-completed.")
        self._end_play()
        return True

    def _next_leader(self, last_player: Player) -> Player:
        """The side after last_player leads, unless it has no cards left"""
        opponent = self.opponent_of(last_player)
        return opponent if opponent.unplayed_cards() else last_player

    def _advance_turn(self, player: Player):
        opponent = self.opponent_of(player)
        if self.can_play(opponent):
            self.current_turn = opponent
        elif self.can_play(player):
            self.current_turn = player
            self._emit(EventType.GO, f"{opponent.name} says Go.", opponent)
        else:
            self._resolve_go(player)

    def _resolve_go(self, last_player: Optional[Player]):
        """Neither side can play: award the go, reset, and pause"""
        if last_player is not None and 0 < self.current_count < self.config.max_count:
            if self._award(last_player, 1, "go"):
                return

        self._reset_count()
        if self.is_play_complete():
            self._end_play()
            return

        if last_player is not None:
            self.current_turn = self._next_leader(last_player)
        else:
            self.current_turn = self.opponent_of(self.current_turn)
        self.state = Phase.PAUSE_ON_GO
        self._emit(EventType.RESET, "Go. Count reset. Continue to resume play.")

    def _reset_count(self):
        self.current_count = 0
        self.played_pile = []

    def _end_play(self):
        self.state = Phase.PAUSE_BEFORE_COUNT
        self._emit(EventType.INFO, "Play phase complete. Continue to count hands.")

    # ------------------------------------------------------------------
    # Counting
    # ------------------------------------------------------------------

    def count_hands(self) -> bool:
        """
        Count non-dealer hand, dealer hand, then the crib

        Each count is followed by a win check that stops the rest.
        """
        if self.state != Phase.PAUSE_BEFORE_COUNT:
            logger.debug("count_hands ignored in phase %s", self.state.value)
            return False

        self._emit(EventType.COUNT, "Counting hands...")
        dealer = self.dealer
        non_dealer = self.non_dealer
        counts = (
            (non_dealer, non_dealer.hand, False, "hand"),
            (dealer, dealer.hand, False, "hand"),
            (dealer, self.crib, True, "crib"),
        )
        for owner, cards, is_crib, label in counts:
            score = RuleEngine.score_hand(
                cards,
                self.cut_card,
                is_crib=is_crib,
                count_double_runs=self.config.count_double_runs,
            )
            self.hand_counts.append((owner.name, label, score))
            owner.add_points(score.total)
            detail = f" ({', '.join(score.reasons())})" if score.total else ""
            self._emit(
                EventType.COUNT,
                f"{owner.name} scores {score.total} from {label}{detail}.",
                owner,
                score.total,
            )
            if self._check_winner():
                return True

        self.dealer = non_dealer
        self.state = Phase.ROUND_OVER
        self._emit(
            EventType.ROUND_OVER,
            f"Current score: {self.player.name} {self.player.score}, "
            f"{self.computer.name} {self.computer.score}",
        )
        return True

    # ------------------------------------------------------------------
    # Scoring helpers
    # ------------------------------------------------------------------

    def _award(self, player: Player, points: int, reason: str) -> bool:
        """
        Add points and run the win check

        Returns:
            True if the game is now over
        """
        player.add_points(points)
        self._emit(
            EventType.SCORE,
            f"{player.name} scores {points} ({reason}).",
            player,
            points,
        )
        return self._check_winner()

    def _check_winner(self) -> bool:
        for p in self.players:
            if p.score >= self.config.winning_score:
                self.winner = p
                self.state = Phase.GAME_OVER
                self._emit(EventType.GAME_OVER, f"{p.name} wins!", p)
                logger.debug(
                    "Game over: %s wins %d-%d",
                    p.name, p.score, self.opponent_of(p).score,
                )
                return True
        return False

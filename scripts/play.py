#!/usr/bin/env python3
"""
Play script

Usage:
    python scripts/play.py --mode play    # play against the computer
    python scripts/play.py --mode watch   # watch two heuristic seats
    python scripts/play.py --mode play --seed 7 --hints
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
import time

# Add the project root to the path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core.cards import Card, cards_to_str
from core.config import GameConfig
from core.state import CribbageGame, Phase, PLAY_PAUSES
from core.strategy import rank_plays
from evaluation import HeuristicAgent

logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


class QuitGame(Exception):
    """Raised when the user types 'q'"""


def parse_args():
    parser = argparse.ArgumentParser(description="Cribbage Play")

    parser.add_argument(
        "--mode",
        type=str,
        default="play",
        choices=["watch", "play"],
        help="Mode: watch two computer seats or play against the computer",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between moves (watch)")
    parser.add_argument("--hints", action="store_true", help="Show ranked play suggestions")
    parser.add_argument("--double-runs", action="store_true", help="Score every distinct run")

    return parser.parse_args()


def print_table(game: CribbageGame):
    """Print scores, the pile and the human hand"""
    print("\n" + "=" * 60)
    print(f"{game.player.name}: {game.player.score}    {game.computer.name}: {game.computer.score}")
    if game.cut_card is not None:
        print(f"Cut card: {game.cut_card}")
    if game.played_pile:
        pile = " ".join(p.card.symbol for p in game.played_pile)
        print(f"Pile: {pile}  (count {game.current_count})")
    print("-" * 60)
    hand = game.player.hand
    print("Your hand: " + "  ".join(
        f"[{i}] {c.symbol}{'*' if game.player.has_played(c) else ''}"
        for i, c in enumerate(hand)
    ))
    print("=" * 60)


def ask(prompt: str) -> str:
    answer = input(prompt).strip()
    if answer.lower() == "q":
        raise QuitGame()
    return answer


def ask_discard(game: CribbageGame) -> List[int]:
    while True:
        answer = ask(f"\nChoose {game.config.discard_count} cards for the crib (e.g. '0 3'): ")
        try:
            indices = [int(tok) for tok in answer.split()]
        except ValueError:
            print("Please enter card numbers")
            continue
        if game.discard_to_crib(indices):
            return indices
        print("Invalid selection, try again")


def ask_play(game: CribbageGame, hints: bool) -> Optional[Card]:
    playable = game.playable_cards(game.player)
    if not playable:
        ask("\nNo legal card. Press Enter to say Go: ")
        return None

    if hints:
        ranked = rank_plays(
            playable,
            game.player.unplayed_cards(),
            game.current_count,
            game.computer.unplayed_cards(),
        )
        print("Suggestions: " + ", ".join(f"{c.symbol} ({v:+.1f})" for c, v in ranked))

    hand = game.player.hand
    while True:
        answer = ask("\nChoose a card to play: ")
        try:
            idx = int(answer)
        except ValueError:
            print("Please enter a card number")
            continue
        if 0 <= idx < len(hand) and hand[idx] in playable:
            return hand[idx]
        print(f"Playable: {cards_to_str(playable)}")


def play_game(args):
    """Human seat against the heuristic computer seat"""
    game = CribbageGame(
        config=GameConfig(count_double_runs=args.double_runs),
        seed=args.seed,
        player_name="You",
    )
    game.add_message_listener(lambda msg: print(f"  {msg}"))

    game.start_new_game()
    while game.cut_for_deal() is None:
        pass

    while not game.is_over:
        if game.state == Phase.DISCARD:
            game.player.sort_hand()
            print_table(game)
            ask_discard(game)
        elif game.state == Phase.PLAY:
            if game.current_turn is game.computer:
                game.computer_play()
                continue
            print_table(game)
            card = ask_play(game, args.hints)
            if card is None:
                game.say_go()
            else:
                game.play_card(game.player, card)
        elif game.state in PLAY_PAUSES or game.state == Phase.PAUSE_BEFORE_COUNT:
            ask("Press Enter to continue...")
            game.continue_after_pause()
        elif game.state == Phase.ROUND_OVER:
            ask("\nPress Enter for the next round...")
            game.continue_after_pause()

    print("\n" + "=" * 60)
    if game.winner is game.player:
        print("You win!")
    else:
        print("You lose!")
    print(f"Final score: {game.player.score} - {game.computer.score}")
    print("=" * 60)


def watch_game(args):
    """Two heuristic seats, narrated"""
    game = CribbageGame(
        config=GameConfig(count_double_runs=args.double_runs),
        seed=args.seed,
        player_name="North",
        computer_name="South",
    )
    game.add_message_listener(lambda msg: print(f"  {msg}"))
    north = HeuristicAgent("North")

    game.start_new_game()
    while game.cut_for_deal() is None:
        pass

    while not game.is_over:
        if game.state == Phase.DISCARD:
            game.discard_to_crib(north.select_discard(list(game.player.hand), game.dealer is game.player))
        elif game.state == Phase.PLAY:
            if game.current_turn is game.computer:
                game.computer_play()
            else:
                card = north.select_play(game, game.player)
                if card is None:
                    game.say_go()
                else:
                    game.play_card(game.player, card)
            time.sleep(args.delay)
        else:
            game.continue_after_pause()

    print("\n" + "=" * 60)
    print(f"Game over! Winner: {game.winner.name}")
    print(f"Final score: {game.player.score} - {game.computer.score}")
    print("=" * 60)


def main():
    args = parse_args()

    print("=" * 60)
    print("Cribbage")
    print("=" * 60)

    try:
        if args.mode == "watch":
            watch_game(args)
        elif args.mode == "play":
            play_game(args)
    except QuitGame:
        print("Leaving the game")


if __name__ == "__main__":
    main()

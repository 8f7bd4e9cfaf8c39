"""
Simulation metrics

Per-game records and the aggregate statistics computed from them
"""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

import numpy as np


@dataclass
class GameRecord:
    """Result of one simulated game"""
    game_number: int
    player_score: int
    computer_score: int
    winner_name: str
    dealer_name: str
    rounds: int = 0
    forced_completions: int = 0

    def to_dict(self) -> Dict:
        return {
            "game_number": self.game_number,
            "player_score": self.player_score,
            "computer_score": self.computer_score,
            "winner_name": self.winner_name,
            "dealer_name": self.dealer_name,
            "rounds": self.rounds,
            "forced_completions": self.forced_completions,
        }


@dataclass
class SimulationSummary:
    """
    Aggregate statistics over a batch of games

    Attributes:
        total_games: games played
        player_wins: games won by the human seat
        computer_wins: games won by the computer seat
        win_rate_percent: human seat win rate, in percent
        avg_player_score: mean final human score
        avg_computer_score: mean final computer score
        computer_win_rate_percent: computer seat win rate, in percent
        avg_rounds: mean rounds per game
        margin: statistics of computer score minus player score
        forced_completions: rounds that hit the pegging iteration ceiling
    """
    total_games: int
    player_wins: int
    computer_wins: int
    win_rate_percent: float
    avg_player_score: float
    avg_computer_score: float
    computer_win_rate_percent: float = 0.0
    avg_rounds: float = 0.0
    margin: Dict[str, float] = field(default_factory=dict)
    forced_completions: int = 0

    def to_dict(self) -> Dict:
        return {
            "total_games": self.total_games,
            "player_wins": self.player_wins,
            "computer_wins": self.computer_wins,
            "win_rate_percent": self.win_rate_percent,
            "avg_player_score": self.avg_player_score,
            "avg_computer_score": self.avg_computer_score,
            "computer_win_rate_percent": self.computer_win_rate_percent,
            "avg_rounds": self.avg_rounds,
            "margin": dict(self.margin),
            "forced_completions": self.forced_completions,
        }

    def __repr__(self) -> str:
        return (
            f"SimulationSummary(games={self.total_games}, "
            f"player_wins={self.player_wins}, computer_wins={self.computer_wins}, "
            f"win_rate={self.win_rate_percent:.1f}%)"
        )


class RunningStats:
    """
    Running statistics

    Online mean and variance (Welford)
    """

    def __init__(self):
        self.n = 0
        self.mean = 0.0
        self.M2 = 0.0
        self.min_val = float('inf')
        self.max_val = float('-inf')

    def update(self, x: float):
        self.n += 1
        delta = x - self.mean
        self.mean += delta / self.n
        delta2 = x - self.mean
        self.M2 += delta * delta2
        self.min_val = min(self.min_val, x)
        self.max_val = max(self.max_val, x)

    @property
    def variance(self) -> float:
        if self.n < 2:
            return 0.0
        return self.M2 / (self.n - 1)

    @property
    def std(self) -> float:
        return float(np.sqrt(self.variance))

    def to_dict(self) -> Dict[str, float]:
        return {
            "count": self.n,
            "mean": self.mean,
            "std": self.std,
            "min": self.min_val if self.n > 0 else 0.0,
            "max": self.max_val if self.n > 0 else 0.0,
        }


def summarize(
    records: Sequence[GameRecord],
    player_name: str = "Player",
    computer_name: str = "Computer",
) -> SimulationSummary:
    """
    Aggregate game records

    Args:
        records: per-game results
        player_name: name of the human seat
        computer_name: name of the computer seat

    Returns:
        SimulationSummary (all zeros for an empty batch)
    """
    n_games = len(records)
    if n_games == 0:
        return SimulationSummary(
            total_games=0,
            player_wins=0,
            computer_wins=0,
            win_rate_percent=0.0,
            avg_player_score=0.0,
            avg_computer_score=0.0,
            margin=RunningStats().to_dict(),
        )

    player_wins = sum(1 for r in records if r.winner_name == player_name)
    computer_wins = sum(1 for r in records if r.winner_name == computer_name)

    margin = RunningStats()
    for r in records:
        margin.update(r.computer_score - r.player_score)

    player_scores: List[int] = [r.player_score for r in records]
    computer_scores: List[int] = [r.computer_score for r in records]

    return SimulationSummary(
        total_games=n_games,
        player_wins=player_wins,
        computer_wins=computer_wins,
        win_rate_percent=round(100.0 * player_wins / n_games, 1),
        avg_player_score=round(float(np.mean(player_scores)), 1),
        avg_computer_score=round(float(np.mean(computer_scores)), 1),
        computer_win_rate_percent=round(100.0 * computer_wins / n_games, 1),
        avg_rounds=round(float(np.mean([r.rounds for r in records])), 1),
        margin=margin.to_dict(),
        forced_completions=sum(r.forced_completions for r in records),
    )

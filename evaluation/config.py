"""
Simulation configuration

Settings for batch runs of the engine
"""
from dataclasses import dataclass, field
from typing import Optional

from core.config import GameConfig


@dataclass
class SimulationConfig:
    """
    Simulation configuration

    Attributes:
        n_games: number of complete games to play
        seed: master seed, per-game seeds are spawned from it (None = entropy)
        max_rounds: rounds per game before the higher score is declared winner
        max_plays_per_round: pegging iteration ceiling per round
        first_dealer: "computer" or "player", opening dealer of game 1
        alternate_dealer: swap the opening dealer every game
        n_workers: worker threads (1 = sequential)
        log_every: log progress every N games (0 = quiet)
        player_name: name of the player seat
        computer_name: name of the computer seat
        game: engine rule configuration
    """
    n_games: int = 100
    seed: Optional[int] = None
    max_rounds: int = 200
    max_plays_per_round: int = 100
    first_dealer: str = "computer"
    alternate_dealer: bool = True
    n_workers: int = 1
    log_every: int = 0
    player_name: str = "Player"
    computer_name: str = "Computer"
    game: GameConfig = field(default_factory=lambda: GameConfig(record_events=False))

    def __post_init__(self):
        if self.first_dealer not in ("computer", "player"):
            raise ValueError(f"first_dealer must be 'computer' or 'player', got {self.first_dealer!r}")
        if self.n_games < 0:
            raise ValueError("n_games must be non-negative")
        if self.player_name == self.computer_name:
            raise ValueError("player_name and computer_name must differ")

    @classmethod
    def from_dict(cls, d: dict) -> 'SimulationConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        if isinstance(filtered.get("game"), dict):
            filtered["game"] = GameConfig.from_dict(filtered["game"])
        return cls(**filtered)

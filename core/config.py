"""
Game configuration

Rule constants for the engine
"""
from dataclasses import dataclass


@dataclass
class GameConfig:
    """
    Engine configuration

    Attributes:
        winning_score: score that ends the game
        hand_size: cards dealt to each player
        discard_count: cards each player sends to the crib
        max_count: pegging count limit
        count_double_runs: score every distinct run (4-4-5-6 = 2 runs of 3)
            instead of only the longest run once
        record_events: keep the GameEvent log on the engine
    """
    winning_score: int = 121
    hand_size: int = 6
    discard_count: int = 2
    max_count: int = 31
    count_double_runs: bool = False
    record_events: bool = True

    @property
    def kept_cards(self) -> int:
        """Cards each player pegs with after discarding"""
        return self.hand_size - self.discard_count

    @classmethod
    def from_dict(cls, d: dict) -> 'GameConfig':
        valid_keys = cls.__dataclass_fields__.keys()
        filtered = {k: v for k, v in d.items() if k in valid_keys}
        return cls(**filtered)

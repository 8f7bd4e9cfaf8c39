"""
Evaluation Layer - automated play and statistics

Modules:
    config: simulation configuration
    evaluator: agents and the game simulator
    arena: parallel simulation
    metrics: game records and aggregate statistics
"""
from .config import SimulationConfig
from .evaluator import (
    Agent,
    RandomAgent,
    FixedPolicyAgent,
    HeuristicAgent,
    GameSimulator,
)
from .arena import ParallelSimulator
from .metrics import (
    GameRecord,
    SimulationSummary,
    RunningStats,
    summarize,
)

__all__ = [
    # config
    "SimulationConfig",
    # evaluator
    "Agent",
    "RandomAgent",
    "FixedPolicyAgent",
    "HeuristicAgent",
    "GameSimulator",
    # arena
    "ParallelSimulator",
    # metrics
    "GameRecord",
    "SimulationSummary",
    "RunningStats",
    "summarize",
]

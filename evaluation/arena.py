"""
Parallel simulation

Runs a GameSimulator batch across a thread pool
"""
from typing import Optional
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from .config import SimulationConfig
from .evaluator import Agent, GameSimulator
from .metrics import SimulationSummary

logger = logging.getLogger(__name__)


class ParallelSimulator(GameSimulator):
    """
    Parallel game simulator

    Games run in worker threads. Each game still draws from its own spawned
    seed, and records are sorted by game number afterwards, so the results
    equal a sequential run with the same seed.

    Agents are shared between threads and must be stateless (or
    thread-safe). RandomAgent with a shared generator is not.
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        player_agent: Optional[Agent] = None,
        computer_agent: Optional[Agent] = None,
        n_workers: Optional[int] = None,
    ):
        super().__init__(config, player_agent, computer_agent)
        self.n_workers = n_workers if n_workers is not None else self.config.n_workers

    def run(self) -> SimulationSummary:
        """Play every game across the worker pool"""
        if self.n_workers <= 1 or self.config.n_games <= 1:
            return super().run()

        self.results = []
        with ThreadPoolExecutor(max_workers=self.n_workers) as executor:
            futures = [
                executor.submit(self.play_game, game_index, seed)
                for game_index, seed in enumerate(self.game_seeds())
            ]
            for future in as_completed(futures):
                self.results.append(future.result())
                self._log_progress(len(self.results))

        self.results.sort(key=lambda r: r.game_number)
        logger.debug("Finished %d games on %d workers", len(self.results), self.n_workers)
        return self.get_summary()

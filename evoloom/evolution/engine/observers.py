from __future__ import annotations

from abc import ABC, abstractmethod

from loguru import logger

from evoloom.evolution.engine.statistics import GenerationStatistics


class EvolutionObserver(ABC):
    """Receives statistics once per generation, synchronously, in registration order."""

    @abstractmethod
    def on_generation(self, statistics: GenerationStatistics) -> None:
        pass


class LoggingObserver(EvolutionObserver):
    """Logs a one-line summary of every generation."""

    def __init__(self, level: str = "INFO"):
        self.level = level

    def on_generation(self, statistics: GenerationStatistics) -> None:
        logger.log(
            self.level,
            "Generation {} | best={!r} | best_fitness={:.4f} | mean={:.4f} | std={:.4f} | t={:.2f}s",
            statistics.generation_number,
            statistics.best_candidate,
            statistics.best_fitness,
            statistics.mean_fitness,
            statistics.fitness_std,
            statistics.elapsed_time,
        )


class HistoryObserver(EvolutionObserver):
    """Keeps every snapshot it receives, for analysis after the run."""

    def __init__(self) -> None:
        self.history: list[GenerationStatistics] = []

    def on_generation(self, statistics: GenerationStatistics) -> None:
        self.history.append(statistics)

    def best_fitness_curve(self) -> list[float]:
        return [s.best_fitness for s in self.history]

    def clear(self) -> None:
        self.history.clear()

    def __len__(self) -> int:
        return len(self.history)

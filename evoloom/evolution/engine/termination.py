from __future__ import annotations

from abc import ABC, abstractmethod
import threading
from typing import Any

from loguru import logger

from evoloom.evolution.engine.statistics import GenerationStatistics
from evoloom.exceptions import ConfigurationError

__all__ = [
    "TerminationCondition",
    "GenerationCount",
    "TargetFitness",
    "TargetCandidate",
    "ElapsedTime",
    "Stagnation",
    "UserAbort",
]


class TerminationCondition(ABC):
    """Predicate deciding, once per generation, whether the run should stop."""

    @abstractmethod
    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        """Return True to stop after the generation described by *statistics*."""

    def reset(self) -> None:
        """Clear per-run state. Called by the engine before generation 0."""

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items() if not k.startswith("_"))
        return f"{type(self).__name__}({fields})"


class GenerationCount(TerminationCondition):
    """Stops once ``generation_count`` generations have been evaluated."""

    def __init__(self, generation_count: int):
        if generation_count <= 0:
            raise ConfigurationError(
                f"generation_count must be positive, got {generation_count}"
            )
        self.generation_count = generation_count

    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        return statistics.generation_number + 1 >= self.generation_count


class TargetFitness(TerminationCondition):
    """Stops when the best fitness reaches ``target``.

    "Reaches" means ``>=`` for natural fitness and ``<=`` for inverted fitness.
    """

    def __init__(self, target: float):
        self.target = float(target)

    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        if statistics.natural_fitness:
            return statistics.best_fitness >= self.target
        return statistics.best_fitness <= self.target


class TargetCandidate(TerminationCondition):
    """Stops when the best candidate equals a known target value."""

    def __init__(self, target: Any):
        self.target = target

    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        return statistics.best_candidate == self.target


class ElapsedTime(TerminationCondition):
    """Stops once the run has lasted at least ``max_seconds``.

    Checked between generations only; an in-flight evaluation is never
    interrupted.
    """

    def __init__(self, max_seconds: float):
        if max_seconds <= 0:
            raise ConfigurationError(f"max_seconds must be positive, got {max_seconds}")
        self.max_seconds = float(max_seconds)

    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        return statistics.elapsed_time >= self.max_seconds


class Stagnation(TerminationCondition):
    """Stops when the best fitness has not improved for ``generation_limit`` generations."""

    def __init__(self, generation_limit: int):
        if generation_limit <= 0:
            raise ConfigurationError(
                f"generation_limit must be positive, got {generation_limit}"
            )
        self.generation_limit = generation_limit
        self._best_fitness: float | None = None
        self._best_generation = 0

    def reset(self) -> None:
        self._best_fitness = None
        self._best_generation = 0

    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        if self._best_fitness is None or self._improves(statistics):
            self._best_fitness = statistics.best_fitness
            self._best_generation = statistics.generation_number
            return False

        stalled = statistics.generation_number - self._best_generation
        if stalled >= self.generation_limit:
            logger.debug(
                "[Stagnation] No improvement for {} generations (best={})",
                stalled,
                self._best_fitness,
            )
            return True
        return False

    def _improves(self, statistics: GenerationStatistics) -> bool:
        if statistics.natural_fitness:
            return statistics.best_fitness > self._best_fitness
        return statistics.best_fitness < self._best_fitness


class UserAbort(TerminationCondition):
    """Stops the run at the next generation boundary after :meth:`abort` is called.

    Safe to trigger from another thread, e.g. a UI or signal handler.
    """

    def __init__(self) -> None:
        self._aborted = threading.Event()

    def abort(self) -> None:
        self._aborted.set()

    def is_aborted(self) -> bool:
        return self._aborted.is_set()

    def reset(self) -> None:
        self._aborted.clear()

    def should_terminate(self, statistics: GenerationStatistics) -> bool:
        return self._aborted.is_set()

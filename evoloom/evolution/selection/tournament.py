from __future__ import annotations

from typing import Sequence, TypeVar

from evoloom.evolution.models import EvaluatedCandidate
from evoloom.evolution.selection.base import SelectionStrategy, check_selection_args
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


class TournamentSelection(SelectionStrategy):
    """Tournament selection over a best-first ranked population.

    Each pick samples ``tournament_size`` candidates with replacement; the
    fittest of them wins with ``probability``, otherwise the least fit does.
    """

    def __init__(self, tournament_size: int = 2, probability: float = 1.0):
        if tournament_size < 1:
            raise ValueError(f"tournament_size must be at least 1, got {tournament_size}")
        if not 0.5 < probability <= 1:
            raise ValueError(f"probability must be in (0.5, 1], got {probability}")
        self.tournament_size = tournament_size
        self.probability = probability

    def select(
        self,
        population: Sequence[EvaluatedCandidate[T]],
        natural_fitness: bool,
        count: int,
        rng: RandomSource,
    ) -> list[T]:
        check_selection_args(population, count)
        selected: list[T] = []
        for _ in range(count):
            # Ranked best-first, so a lower index is a fitter candidate.
            entrants = rng.integers(0, len(population), size=self.tournament_size)
            if rng.random() < self.probability:
                winner = int(entrants.min())
            else:
                winner = int(entrants.max())
            selected.append(population[winner].candidate)
        return selected


class TruncationSelection(SelectionStrategy):
    """Uniform picks from the best ``ratio`` share of the population."""

    def __init__(self, ratio: float):
        if not 0 < ratio <= 1:
            raise ValueError(f"ratio must be in (0, 1], got {ratio}")
        self.ratio = ratio

    def select(
        self,
        population: Sequence[EvaluatedCandidate[T]],
        natural_fitness: bool,
        count: int,
        rng: RandomSource,
    ) -> list[T]:
        check_selection_args(population, count)
        if count == 0:
            return []
        eligible = max(1, int(round(self.ratio * len(population))))
        indices = rng.integers(0, eligible, size=count)
        return [population[int(i)].candidate for i in indices]

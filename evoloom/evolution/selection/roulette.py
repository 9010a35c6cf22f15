from __future__ import annotations

from typing import Sequence, TypeVar

from loguru import logger
import numpy as np

from evoloom.evolution.models import EvaluatedCandidate
from evoloom.evolution.selection.base import SelectionStrategy, check_selection_args
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


def selection_weights(fitnesses: Sequence[float], natural_fitness: bool) -> np.ndarray:
    """Map fitness scores to non-negative weights that grow with desirability.

    Inverted fitness is flipped against the worst (largest) score; natural
    fitness with negative values is shifted so the worst score weighs zero.
    """
    values = np.asarray(fitnesses, dtype=float)
    if not natural_fitness:
        return values.max() - values
    if values.min() < 0:
        return values - values.min()
    return values


class RouletteWheelSelection(SelectionStrategy):
    """Fitness-proportionate selection with replacement.

    Falls back to uniform picks when every candidate carries the same weight
    (including the all-zero case).
    """

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

        weights = selection_weights([c.fitness for c in population], natural_fitness)
        total = float(weights.sum())

        if total <= 0 or np.ptp(weights) == 0:
            logger.debug(
                "[RouletteWheelSelection] Uniform weights, picking {} of {} uniformly",
                count,
                len(population),
            )
            indices = rng.integers(0, len(population), size=count)
        else:
            cumulative = np.cumsum(weights)
            draws = rng.random(count) * total
            indices = np.searchsorted(cumulative, draws, side="right")
            # Float rounding in cumsum can leave the last edge slightly short.
            indices = np.minimum(indices, len(population) - 1)

        return [population[int(i)].candidate for i in indices]

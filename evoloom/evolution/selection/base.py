from abc import ABC, abstractmethod
from typing import Sequence, TypeVar

from evoloom.evolution.models import EvaluatedCandidate
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


class SelectionStrategy(ABC):
    """Base class for parent selection strategies."""

    @abstractmethod
    def select(
        self,
        population: Sequence[EvaluatedCandidate[T]],
        natural_fitness: bool,
        count: int,
        rng: RandomSource,
    ) -> list[T]:
        """
        Pick candidates to breed from.

        Args:
            population: Evaluated candidates ranked best-first
            natural_fitness: True if higher fitness is better
            count: Number of picks to make
            rng: Shared random source

        Returns:
            Exactly ``count`` candidates in draw order; the same candidate may
            appear more than once
        """


def check_selection_args(population: Sequence, count: int) -> None:
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count and not population:
        raise ValueError("cannot select from an empty population")

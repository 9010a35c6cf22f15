from abc import ABC, abstractmethod
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


class FitnessEvaluator(ABC, Generic[T]):
    """Scores one candidate, optionally relative to the rest of its generation."""

    @abstractmethod
    def evaluate(self, candidate: T, population: Sequence[T]) -> float:
        """
        Compute the fitness of a candidate.

        Called from worker threads; implementations must not mutate shared
        state without their own synchronisation.

        Args:
            candidate: The candidate to score
            population: Read-only snapshot of every candidate in the
                generation, including ``candidate`` itself. Evaluators that
                compare against peers decide whether to skip self-comparison.

        Returns:
            A finite real fitness score
        """

    @abstractmethod
    def is_natural(self) -> bool:
        """True if higher scores are better, False if lower scores are better."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Sequence, TypeVar

from evoloom.exceptions import OperatorError
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


class EvolutionaryOperator(ABC, Generic[T]):
    """Transforms a list of selected candidates into the same number of offspring."""

    @abstractmethod
    def apply(self, candidates: Sequence[T], rng: RandomSource) -> list[T]:
        """
        Produce offspring from *candidates*.

        Args:
            candidates: Candidates to evolve; must not be modified in place
            rng: Shared random source for every stochastic decision

        Returns:
            A new list with exactly ``len(candidates)`` entries
        """


class IdentityOperator(EvolutionaryOperator[T]):
    """Passes candidates through unchanged."""

    def apply(self, candidates: Sequence[T], rng: RandomSource) -> list[T]:
        return list(candidates)


def apply_checked(
    operator: EvolutionaryOperator[T], candidates: Sequence[T], rng: RandomSource
) -> list[T]:
    """Apply *operator* and enforce that it preserves the candidate count."""
    result = list(operator.apply(candidates, rng))
    if len(result) != len(candidates):
        raise OperatorError(
            f"{type(operator).__name__} returned {len(result)} candidate(s) "
            f"for {len(candidates)} input(s)"
        )
    return result

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

__all__ = ["EvaluatedCandidate", "Population", "rank_population"]

T = TypeVar("T")


@dataclass(frozen=True)
class EvaluatedCandidate(Generic[T]):
    """A candidate paired with the fitness it scored in one generation."""

    candidate: T
    fitness: float


# Ranked best-first. Never mutated once produced; the next generation is
# always a new tuple.
Population = tuple[EvaluatedCandidate[T], ...]


def rank_population(
    evaluated: Iterable[EvaluatedCandidate[T]], natural: bool
) -> Population:
    """Sort candidates best-first.

    Natural fitness ranks higher scores first, inverted fitness lower scores
    first. The sort is stable, so candidates with equal fitness keep their
    evaluation order.
    """
    return tuple(sorted(evaluated, key=lambda c: c.fitness, reverse=natural))

from __future__ import annotations

from typing import Sequence, TypeVar

from evoloom.evolution.operators.base import EvolutionaryOperator, apply_checked
from evoloom.utils.rng import RandomSource

T = TypeVar("T")


class EvolutionPipeline(EvolutionaryOperator[T]):
    """Applies a chain of operators in sequence.

    Each stage receives the complete output of the previous one. An empty
    pipeline returns its input unchanged.
    """

    def __init__(self, operators: Sequence[EvolutionaryOperator[T]]):
        self.operators = list(operators)

    def apply(self, candidates: Sequence[T], rng: RandomSource) -> list[T]:
        population = list(candidates)
        for operator in self.operators:
            population = apply_checked(operator, population, rng)
        return population

    def __len__(self) -> int:
        return len(self.operators)

    def __repr__(self) -> str:
        stages = ", ".join(type(op).__name__ for op in self.operators)
        return f"EvolutionPipeline([{stages}])"

"""Evolve a string until it matches a target.

The classic demonstration problem: candidates are fixed-length strings over
an alphabet, fitness is the number of positions matching the target.
"""

from __future__ import annotations

import string
from typing import Sequence

from evoloom.evolution.engine import (
    EngineConfig,
    EvolutionEngine,
    EvolutionObserver,
    TargetFitness,
)
from evoloom.evolution.factories import StringFactory
from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.operators import EvolutionPipeline, StringCrossover, StringMutation
from evoloom.evolution.selection import RouletteWheelSelection

DEFAULT_ALPHABET = string.ascii_uppercase + " "


class StringEvaluator(FitnessEvaluator[str]):
    """Natural fitness: count of characters matching the target position by position."""

    def __init__(self, target: str):
        self.target = target

    def evaluate(self, candidate: str, population: Sequence[str]) -> float:
        return float(sum(1 for a, b in zip(candidate, self.target) if a == b))

    def is_natural(self) -> bool:
        return True


def build_string_engine(
    target: str,
    alphabet: str = DEFAULT_ALPHABET,
    *,
    population_size: int = 100,
    elite_count: int = 5,
    mutation_probability: float = 0.02,
    max_generations: int | None = None,
    timeout: float | None = 120.0,
    seed: int | None = None,
    max_workers: int | None = None,
    observers: Sequence[EvolutionObserver] = (),
) -> tuple[EvolutionEngine[str], EngineConfig]:
    """Wire up an engine and config that evolve strings towards *target*."""
    missing = set(target) - set(alphabet)
    if missing:
        raise ValueError(f"target uses characters outside the alphabet: {sorted(missing)}")

    engine = EvolutionEngine(
        StringFactory(alphabet, len(target)),
        StringEvaluator(target),
        max_workers=max_workers,
        observers=observers,
    )
    config = EngineConfig(
        population_size=population_size,
        elite_count=elite_count,
        operator=EvolutionPipeline(
            [StringMutation(alphabet, mutation_probability), StringCrossover()]
        ),
        selection=RouletteWheelSelection(),
        termination_conditions=[TargetFitness(len(target))],
        max_generations=max_generations,
        timeout=timeout,
        seed=seed,
    )
    return engine, config

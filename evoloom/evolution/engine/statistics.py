from __future__ import annotations

from typing import Any, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from evoloom.evolution.models import EvaluatedCandidate


class GenerationStatistics(BaseModel):
    """Immutable snapshot of one generation, handed to observers."""

    generation_number: int = Field(ge=0, description="Zero-based generation index")
    elapsed_time: float = Field(ge=0, description="Seconds since the run started")
    best_candidate: Any = Field(description="Fittest candidate of the generation")
    best_fitness: float = Field(description="Fitness of the best candidate")
    mean_fitness: float = Field(description="Arithmetic mean fitness")
    fitness_std: float = Field(ge=0, description="Population standard deviation of fitness")
    population_size: int = Field(gt=0, description="Number of candidates evaluated")
    elite_count: int = Field(default=0, ge=0, description="Candidates carried over unchanged")
    natural_fitness: bool = Field(description="True if higher fitness is better")

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @classmethod
    def from_population(
        cls,
        population: Sequence[EvaluatedCandidate],
        *,
        generation_number: int,
        elapsed_time: float,
        natural_fitness: bool,
        elite_count: int = 0,
    ) -> "GenerationStatistics":
        """Summarise a population ranked best-first."""
        fitness = np.array([c.fitness for c in population], dtype=float)
        best = population[0]
        return cls(
            generation_number=generation_number,
            elapsed_time=elapsed_time,
            best_candidate=best.candidate,
            best_fitness=best.fitness,
            mean_fitness=float(fitness.mean()),
            fitness_std=float(fitness.std()),
            population_size=len(population),
            elite_count=elite_count,
            natural_fitness=natural_fitness,
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump()

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from evoloom.evolution.engine.termination import (
    ElapsedTime,
    GenerationCount,
    TerminationCondition,
)
from evoloom.evolution.operators.base import EvolutionaryOperator, IdentityOperator
from evoloom.evolution.selection.base import SelectionStrategy
from evoloom.evolution.selection.roulette import RouletteWheelSelection
from evoloom.exceptions import ConfigurationError


class EngineConfig(BaseModel):
    """Configuration of a single EvolutionEngine run.

    Field types are coerced by pydantic; cross-field consistency is checked
    by :meth:`validate_for_run`, which the engine calls before generation 0.
    """

    population_size: int = Field(default=100, description="Candidates per generation")
    elite_count: int | None = Field(
        default=None, description="Absolute number of elites carried forward"
    )
    elite_fraction: float | None = Field(
        default=None,
        description="Share of the population carried forward, in [0, 1)",
    )
    operator: EvolutionaryOperator = Field(
        default_factory=IdentityOperator,
        description="Root of the operator tree that turns parents into offspring",
    )
    selection: SelectionStrategy = Field(default_factory=RouletteWheelSelection)
    termination_conditions: list[TerminationCondition] = Field(
        default_factory=list,
        description="Run stops at the first generation where any condition holds",
    )
    max_generations: int | None = Field(
        default=None, description="Hard cap on the number of generations"
    )
    timeout: float | None = Field(
        default=None, description="Wall-clock limit in seconds, checked between generations"
    )
    seed: int | None = Field(default=None, description="Seed for the run's random source")
    seed_candidates: list[Any] = Field(
        default_factory=list,
        description="Candidates placed in generation 0 before random ones",
    )
    elites_in_selection_pool: bool = Field(
        default=True,
        description="Whether elites may also be selected as breeding parents",
    )
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def resolved_elite_count(self) -> int:
        if self.elite_count is not None:
            return self.elite_count
        if self.elite_fraction is not None:
            elites = int(math.floor(self.elite_fraction * self.population_size + 1e-9))
            if self.elite_fraction < 1:
                elites = min(elites, self.population_size - 1)
            return elites
        return 0

    def all_termination_conditions(self) -> list[TerminationCondition]:
        """Configured conditions plus the hard generation and time limits."""
        conditions = list(self.termination_conditions)
        if self.max_generations is not None:
            conditions.append(GenerationCount(self.max_generations))
        if self.timeout is not None:
            conditions.append(ElapsedTime(self.timeout))
        return conditions

    def validate_for_run(self) -> None:
        if self.population_size <= 0:
            raise ConfigurationError(
                f"population_size must be positive, got {self.population_size}"
            )
        if self.elite_count is not None and self.elite_fraction is not None:
            raise ConfigurationError("Specify elite_count or elite_fraction, not both")
        if self.elite_fraction is not None and not 0 <= self.elite_fraction < 1:
            raise ConfigurationError(
                f"elite_fraction must be in [0, 1), got {self.elite_fraction}"
            )

        elites = self.resolved_elite_count
        if not 0 <= elites < self.population_size:
            raise ConfigurationError(
                f"Elite count must be in [0, {self.population_size}), got {elites}"
            )
        if len(self.seed_candidates) > self.population_size:
            raise ConfigurationError(
                f"Too many seed candidates for population size {self.population_size}: "
                f"got {len(self.seed_candidates)}"
            )
        if self.max_generations is not None and self.max_generations <= 0:
            raise ConfigurationError(
                f"max_generations must be positive, got {self.max_generations}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        if not self.all_termination_conditions():
            raise ConfigurationError(
                "At least one termination condition, max_generations or timeout is required"
            )

from __future__ import annotations

import asyncio
from enum import Enum
import time
from typing import Generic, Iterable, NamedTuple, TypeVar

from loguru import logger

from evoloom.evolution.engine.config import EngineConfig
from evoloom.evolution.engine.evaluation import EvaluationCoordinator
from evoloom.evolution.engine.observers import EvolutionObserver
from evoloom.evolution.engine.statistics import GenerationStatistics
from evoloom.evolution.engine.termination import TerminationCondition
from evoloom.evolution.factories.base import CandidateFactory
from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.models import EvaluatedCandidate, Population
from evoloom.evolution.operators.base import apply_checked
from evoloom.exceptions import EvolutionError, ObserverError, OperatorError
from evoloom.utils.rng import RandomSource, create_random_source

__all__ = ["EngineState", "EvolutionEngine", "EvolutionResult"]

T = TypeVar("T")


class EngineState(str, Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    REPORTING = "reporting"
    CHECK_TERMINATION = "check_termination"
    BREEDING = "breeding"
    TERMINATED = "terminated"


class EvolutionResult(NamedTuple):
    best: EvaluatedCandidate
    statistics: GenerationStatistics


class EvolutionEngine(Generic[T]):
    """
    Generational evolution loop:
    - Generation 0 comes from the candidate factory (plus any seed candidates).
    - Every generation is evaluated, reported to observers, then checked
      against the termination conditions.
    - Survivors are the top elites copied verbatim plus offspring bred from
      selected parents by the configured operator tree.

    The loop itself is sequential. Only fitness evaluation runs in parallel,
    and all random draws come from one generator owned by the run, so a fixed
    seed reproduces a run exactly.
    """

    def __init__(
        self,
        factory: CandidateFactory[T],
        evaluator: FitnessEvaluator[T],
        *,
        max_workers: int | None = None,
        observers: Iterable[EvolutionObserver] = (),
    ):
        self.factory = factory
        self.evaluator = evaluator
        self.max_workers = max_workers

        self._observers: list[EvolutionObserver] = list(observers)
        self._state = EngineState.IDLE
        self._satisfied: list[TerminationCondition] = []
        self._observer_errors: list[ObserverError] = []

        logger.info(
            "[EvolutionEngine] Init | factory={}, evaluator={}",
            type(self.factory).__name__,
            type(self.evaluator).__name__,
        )

    # ------------------------------------------------------------------
    # Observers and run state
    # ------------------------------------------------------------------

    def add_observer(self, observer: EvolutionObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: EvolutionObserver) -> None:
        self._observers.remove(observer)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def satisfied_termination_conditions(self) -> list[TerminationCondition]:
        """Conditions that fired in the final generation of the last run."""
        return list(self._satisfied)

    @property
    def observer_errors(self) -> list[ObserverError]:
        """Observer failures surfaced during the last run."""
        return list(self._observer_errors)

    def is_running(self) -> bool:
        return self._state not in (EngineState.IDLE, EngineState.TERMINATED)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def run(self, config: EngineConfig) -> EvolutionResult:
        """Evolve until a termination condition holds; return the best candidate."""
        population, statistics = await self._run(config)
        return EvolutionResult(population[0], statistics)

    async def run_population(self, config: EngineConfig) -> Population:
        """Like :meth:`run`, but return the whole final population, ranked."""
        population, _ = await self._run(config)
        return population

    def evolve(self, config: EngineConfig) -> EvolutionResult:
        """Blocking wrapper around :meth:`run`; not for use inside an event loop."""
        return asyncio.run(self.run(config))

    def evolve_population(self, config: EngineConfig) -> Population:
        return asyncio.run(self.run_population(config))

    # ------------------------------------------------------------------
    # Generation loop
    # ------------------------------------------------------------------

    async def _run(self, config: EngineConfig) -> tuple[Population, GenerationStatistics]:
        config.validate_for_run()
        conditions = config.all_termination_conditions()
        for condition in conditions:
            condition.reset()

        size = config.population_size
        elite_count = config.resolved_elite_count
        rng = create_random_source(config.seed)
        self._satisfied = []
        self._observer_errors = []

        logger.info(
            "[EvolutionEngine] Start | population_size={}, elites={}, seed={}, conditions={}",
            size,
            elite_count,
            config.seed,
            conditions,
        )
        started = time.monotonic()

        try:
            self._state = EngineState.INITIALIZING
            candidates = self.factory.generate_initial_population(
                size, rng, config.seed_candidates
            )
            if len(candidates) != size:
                raise EvolutionError(
                    f"{type(self.factory).__name__} produced {len(candidates)} "
                    f"candidate(s), expected {size}",
                    generation=0,
                )

            generation = 0
            last_statistics: GenerationStatistics | None = None
            with EvaluationCoordinator(self.evaluator, self.max_workers) as coordinator:
                natural = coordinator.natural
                while True:
                    self._state = EngineState.EVALUATING
                    population = await self._evaluate(
                        coordinator, candidates, generation, last_statistics
                    )

                    self._state = EngineState.REPORTING
                    last_statistics = GenerationStatistics.from_population(
                        population,
                        generation_number=generation,
                        elapsed_time=time.monotonic() - started,
                        natural_fitness=natural,
                        elite_count=elite_count,
                    )
                    logger.debug(
                        "[EvolutionEngine] Generation {} | best={}, mean={:.4f}",
                        generation,
                        last_statistics.best_fitness,
                        last_statistics.mean_fitness,
                    )
                    self._notify_observers(last_statistics)

                    self._state = EngineState.CHECK_TERMINATION
                    # Every condition sees every generation; stateful ones rely on it.
                    satisfied = [c for c in conditions if c.should_terminate(last_statistics)]
                    if satisfied:
                        self._satisfied = satisfied
                        break

                    self._state = EngineState.BREEDING
                    candidates = self._breed(
                        population, config, elite_count, natural, rng, generation, last_statistics
                    )
                    generation += 1
        finally:
            self._state = EngineState.TERMINATED

        logger.info(
            "[EvolutionEngine] Stop | generation={}, best_fitness={}, satisfied={}, elapsed={:.2f}s",
            last_statistics.generation_number,
            last_statistics.best_fitness,
            self._satisfied,
            last_statistics.elapsed_time,
        )
        return population, last_statistics

    async def _evaluate(
        self,
        coordinator: EvaluationCoordinator[T],
        candidates: list[T],
        generation: int,
        last_statistics: GenerationStatistics | None,
    ) -> Population:
        try:
            return await coordinator.evaluate(candidates)
        except EvolutionError as exc:
            exc.generation = generation
            exc.last_statistics = last_statistics
            logger.error("[EvolutionEngine] Generation {} aborted: {}", generation, exc)
            raise

    def _breed(
        self,
        population: Population,
        config: EngineConfig,
        elite_count: int,
        natural: bool,
        rng: RandomSource,
        generation: int,
        last_statistics: GenerationStatistics,
    ) -> list[T]:
        offspring_count = config.population_size - elite_count
        elites = [c.candidate for c in population[:elite_count]]
        pool = population if config.elites_in_selection_pool else population[elite_count:]

        try:
            parents = config.selection.select(pool, natural, offspring_count, rng)
            if len(parents) != offspring_count:
                raise OperatorError(
                    f"{type(config.selection).__name__} returned {len(parents)} "
                    f"parent(s), expected {offspring_count}"
                )
            offspring = apply_checked(config.operator, parents, rng)
        except OperatorError as exc:
            exc.generation = generation
            exc.last_statistics = last_statistics
            logger.error("[EvolutionEngine] Breeding failed at generation {}: {}", generation, exc)
            raise
        except Exception as exc:
            logger.error("[EvolutionEngine] Breeding failed at generation {}: {}", generation, exc)
            raise OperatorError(
                f"Breeding failed: {exc}",
                generation=generation,
                last_statistics=last_statistics,
            ) from exc

        return elites + offspring

    def _notify_observers(self, statistics: GenerationStatistics) -> None:
        for observer in self._observers:
            try:
                observer.on_generation(statistics)
            except Exception as exc:
                error = ObserverError(
                    f"{type(observer).__name__} failed at generation "
                    f"{statistics.generation_number}: {exc}",
                    observer=observer,
                    generation=statistics.generation_number,
                )
                error.__cause__ = exc
                self._observer_errors.append(error)
                logger.opt(exception=exc).error("[EvolutionEngine] {}", error)

"""Tests for the generation loop."""

from __future__ import annotations

import asyncio
from typing import Sequence

import pytest

from evoloom.evolution.engine import (
    EngineConfig,
    EngineState,
    EvolutionEngine,
    EvolutionObserver,
    GenerationCount,
    GenerationStatistics,
    HistoryObserver,
    LoggingObserver,
    TargetFitness,
    UserAbort,
)
from evoloom.evolution.factories import StringFactory
from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.operators import EvolutionPipeline, SplitEvolution, StringMutation
from evoloom.evolution.selection import RouletteWheelSelection, SelectionStrategy
from evoloom.exceptions import (
    ConfigurationError,
    EvaluationError,
    EvolutionError,
    ObserverError,
    OperatorError,
)
from evoloom.problems.strings import StringEvaluator, build_string_engine

from conftest import DropOneOperator, IntFactory, ShiftOperator, ValueEvaluator


def _int_config(**overrides) -> EngineConfig:
    values = {
        "population_size": 12,
        "elite_count": 3,
        "operator": ShiftOperator(),
        "termination_conditions": [GenerationCount(6)],
        "seed": 123,
    }
    values.update(overrides)
    return EngineConfig(**values)


def _without_time(history: list[GenerationStatistics]) -> list[dict]:
    return [s.model_dump(exclude={"elapsed_time"}) for s in history]


class RecordingSelection(SelectionStrategy):
    def __init__(self) -> None:
        self.inner = RouletteWheelSelection()
        self.pool_sizes: list[int] = []

    def select(self, population, natural_fitness, count, rng):
        self.pool_sizes.append(len(population))
        return self.inner.select(population, natural_fitness, count, rng)


class ExplodingObserver(EvolutionObserver):
    def on_generation(self, statistics: GenerationStatistics) -> None:
        raise RuntimeError("observer failure")


class TestEngineLoop:
    def test_population_size_is_constant(self) -> None:
        evaluator = ValueEvaluator()
        history = HistoryObserver()
        engine = EvolutionEngine(IntFactory(), evaluator, max_workers=1, observers=[history])
        engine.evolve(_int_config())

        assert len(history) == 6
        assert all(s.population_size == 12 for s in history.history)
        assert all(len(generation) == 12 for generation in evaluator.generations)

    def test_generation_numbers_increase_by_one(self) -> None:
        history = HistoryObserver()
        engine = EvolutionEngine(IntFactory(), ValueEvaluator(), observers=[history])
        best, stats = engine.evolve(_int_config())

        assert [s.generation_number for s in history.history] == list(range(6))
        assert stats == history.history[-1]
        assert best.candidate == stats.best_candidate
        assert best.fitness == stats.best_fitness

    @pytest.mark.parametrize("elite_count", [0, 1, 3, 11])
    def test_elites_survive_unchanged(self, elite_count: int) -> None:
        evaluator = ValueEvaluator()
        engine = EvolutionEngine(IntFactory(), evaluator, max_workers=1)
        engine.evolve(_int_config(elite_count=elite_count))

        for current, following in zip(evaluator.generations, evaluator.generations[1:]):
            top = sorted(current, reverse=True)[:elite_count]
            assert list(following[:elite_count]) == top

    def test_inverted_fitness_best_is_lowest(self) -> None:
        evaluator = ValueEvaluator(natural=False)
        engine = EvolutionEngine(IntFactory(), evaluator, max_workers=1)
        best, stats = engine.evolve(_int_config(termination_conditions=[GenerationCount(2)]))

        generation0, generation1 = evaluator.generations
        assert generation1[0] == min(generation0)
        assert best.candidate == min(generation1)
        assert stats.natural_fitness is False

    def test_elitism_keeps_best_fitness_monotonic(self) -> None:
        history = HistoryObserver()
        engine = EvolutionEngine(IntFactory(), ValueEvaluator(natural=False), observers=[history])
        engine.evolve(_int_config(elite_count=1, termination_conditions=[GenerationCount(10)]))

        curve = history.best_fitness_curve()
        assert all(later <= earlier for earlier, later in zip(curve, curve[1:]))

    def test_seed_candidates_lead_generation_zero(self) -> None:
        evaluator = ValueEvaluator()
        engine = EvolutionEngine(IntFactory(), evaluator, max_workers=1)
        engine.evolve(_int_config(seed_candidates=[5000, 6000]))

        assert evaluator.generations[0][:2] == (5000, 6000)

    def test_elites_excluded_from_selection_pool(self) -> None:
        selection = RecordingSelection()
        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        engine.evolve(_int_config(selection=selection, elites_in_selection_pool=False))
        assert set(selection.pool_sizes) == {9}

    def test_elites_in_selection_pool_by_default(self) -> None:
        selection = RecordingSelection()
        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        engine.evolve(_int_config(selection=selection))
        assert set(selection.pool_sizes) == {12}

    def test_run_population_returns_ranked_generation(self) -> None:
        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        population = engine.evolve_population(_int_config())
        assert len(population) == 12
        fitness = [c.fitness for c in population]
        assert fitness == sorted(fitness, reverse=True)

    def test_async_entry_point(self) -> None:
        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        result = asyncio.run(engine.run(_int_config()))
        assert result.statistics.generation_number == 5

    def test_state_and_satisfied_conditions(self) -> None:
        condition = GenerationCount(2)
        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        assert engine.state is EngineState.IDLE
        engine.evolve(_int_config(termination_conditions=[condition]))
        assert engine.state is EngineState.TERMINATED
        assert not engine.is_running()
        assert engine.satisfied_termination_conditions == [condition]

    def test_user_abort_stops_at_generation_boundary(self) -> None:
        abort = UserAbort()

        class AbortAfterFirst(EvolutionObserver):
            def on_generation(self, statistics: GenerationStatistics) -> None:
                abort.abort()

        history = HistoryObserver()
        engine = EvolutionEngine(
            IntFactory(), ValueEvaluator(), observers=[AbortAfterFirst(), history]
        )
        engine.evolve(_int_config(termination_conditions=[abort], max_generations=100))
        assert len(history) == 1
        assert engine.satisfied_termination_conditions == [abort]

    def test_removed_observer_not_notified(self) -> None:
        kept = HistoryObserver()
        removed = HistoryObserver()
        engine = EvolutionEngine(IntFactory(), ValueEvaluator(), observers=[kept, removed])
        engine.remove_observer(removed)
        engine.evolve(_int_config())
        assert len(kept) == 6
        assert len(removed) == 0

    def test_history_cleared_between_runs(self) -> None:
        history = HistoryObserver()
        engine = EvolutionEngine(IntFactory(), ValueEvaluator(), observers=[history])
        engine.evolve(_int_config())
        history.clear()
        assert len(history) == 0
        engine.evolve(_int_config(termination_conditions=[GenerationCount(2)]))
        assert [s.generation_number for s in history.history] == [0, 1]


class TestDeterminism:
    def test_same_seed_same_statistics(self) -> None:
        histories = []
        for _ in range(2):
            history = HistoryObserver()
            engine = EvolutionEngine(IntFactory(), ValueEvaluator(), observers=[history])
            engine.evolve(_int_config(operator=SplitEvolution(ShiftOperator(), ShiftOperator(), 0.3)))
            histories.append(_without_time(history.history))
        assert histories[0] == histories[1]

    def test_worker_count_does_not_change_results(self) -> None:
        histories = []
        for workers in (1, 2, 8):
            history = HistoryObserver()
            engine = EvolutionEngine(
                IntFactory(), ValueEvaluator(), max_workers=workers, observers=[history]
            )
            engine.evolve(_int_config())
            histories.append(_without_time(history.history))
        assert histories[0] == histories[1] == histories[2]

    def test_different_seeds_differ(self) -> None:
        runs = []
        for seed in (1, 2):
            evaluator = ValueEvaluator()
            EvolutionEngine(IntFactory(), evaluator, max_workers=1).evolve(_int_config(seed=seed))
            runs.append(evaluator.generations)
        assert runs[0] != runs[1]


class TestEngineErrors:
    def test_configuration_error_before_any_work(self) -> None:
        factory = IntFactory()
        engine = EvolutionEngine(factory, ValueEvaluator())
        with pytest.raises(ConfigurationError):
            engine.evolve(_int_config(elite_count=12))
        with pytest.raises(ConfigurationError):
            engine.evolve(_int_config(termination_conditions=[]))
        with pytest.raises(ConfigurationError):
            engine.evolve(_int_config(population_size=0, elite_count=0))
        assert factory.calls == 0

    def test_evaluation_error_carries_last_statistics(self) -> None:
        engine = EvolutionEngine(IntFactory(), ValueEvaluator(fail_at_generation=2), max_workers=1)
        with pytest.raises(EvaluationError) as info:
            engine.evolve(_int_config())

        assert info.value.generation == 2
        assert info.value.last_statistics is not None
        assert info.value.last_statistics.generation_number == 1
        assert engine.state is EngineState.TERMINATED

    def test_evaluation_error_in_first_generation(self) -> None:
        engine = EvolutionEngine(IntFactory(), ValueEvaluator(fail_at_generation=0), max_workers=4)
        with pytest.raises(EvaluationError) as info:
            engine.evolve(_int_config())
        assert info.value.generation == 0
        assert info.value.last_statistics is None

    def test_factory_count_mismatch(self) -> None:
        class OversizedFactory(IntFactory):
            def generate_initial_population(self, size, rng, seed_candidates=None):
                return super().generate_initial_population(size, rng, seed_candidates) + [1, 2, 3]

        evaluator = ValueEvaluator()
        engine = EvolutionEngine(OversizedFactory(), evaluator)
        with pytest.raises(EvolutionError) as info:
            engine.evolve(_int_config())
        assert info.value.generation == 0
        assert evaluator.generations == []
        assert engine.state is EngineState.TERMINATED

    def test_operator_count_mismatch(self) -> None:
        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        with pytest.raises(OperatorError) as info:
            engine.evolve(_int_config(operator=DropOneOperator()))
        assert info.value.generation == 0
        assert info.value.last_statistics.generation_number == 0

    def test_operator_exception_wrapped(self) -> None:
        class Broken(ShiftOperator):
            def apply(self, candidates, rng):
                raise KeyError("nope")

        engine = EvolutionEngine(IntFactory(), ValueEvaluator())
        with pytest.raises(OperatorError) as info:
            engine.evolve(_int_config(operator=Broken()))
        assert isinstance(info.value.__cause__, KeyError)

    def test_observer_failure_does_not_abort(self) -> None:
        history = HistoryObserver()
        engine = EvolutionEngine(
            IntFactory(), ValueEvaluator(), observers=[ExplodingObserver(), history]
        )
        best, stats = engine.evolve(_int_config())

        assert stats.generation_number == 5
        assert len(history) == 6
        errors = engine.observer_errors
        assert len(errors) == 6
        assert all(isinstance(e, ObserverError) for e in errors)
        assert [e.generation for e in errors] == list(range(6))
        assert isinstance(errors[0].__cause__, RuntimeError)


class TestEndToEnd:
    def test_single_symbol_target(self) -> None:
        alphabet = "ABCD"

        class ExactMatch(FitnessEvaluator[str]):
            def evaluate(self, candidate: str, population: Sequence[str]) -> float:
                return 1.0 if candidate == "C" else 0.0

            def is_natural(self) -> bool:
                return True

        engine = EvolutionEngine(
            StringFactory(alphabet, 1), ExactMatch(), observers=[LoggingObserver("DEBUG")]
        )
        config = EngineConfig(
            population_size=20,
            elite_fraction=0.1,
            operator=StringMutation(alphabet, 0.5),
            termination_conditions=[TargetFitness(1.0)],
            max_generations=1000,
            seed=0,
        )
        best, stats = engine.evolve(config)

        assert best.candidate == "C"
        assert stats.best_fitness == 1.0
        assert 0 <= stats.generation_number < 1000
        assert stats.population_size == 20
        assert stats.elite_count == 2

    def test_string_engine_reaches_target(self) -> None:
        engine, config = build_string_engine(
            "ABBA",
            alphabet="AB",
            population_size=30,
            elite_count=2,
            mutation_probability=0.1,
            max_generations=500,
            seed=11,
        )
        best, stats = engine.evolve(config)
        assert best.candidate == "ABBA"
        assert stats.best_fitness == 4.0

    def test_string_engine_rejects_foreign_target(self) -> None:
        with pytest.raises(ValueError):
            build_string_engine("abc", alphabet="ABC")

    def test_string_evaluator(self) -> None:
        evaluator = StringEvaluator("HELLO")
        assert evaluator.evaluate("HELXO", []) == 4.0
        assert evaluator.is_natural()

    def test_split_pipeline_tree(self) -> None:
        alphabet = "ABCDEFGH"
        target = "HEAD"
        tree = SplitEvolution(
            StringMutation(alphabet, 0.25),
            EvolutionPipeline([StringMutation(alphabet, 0.05)]),
            0.3,
        )
        history = HistoryObserver()
        engine = EvolutionEngine(
            StringFactory(alphabet, len(target)), StringEvaluator(target), observers=[history]
        )
        best, stats = engine.evolve(
            EngineConfig(
                population_size=40,
                elite_count=4,
                operator=tree,
                termination_conditions=[TargetFitness(len(target))],
                max_generations=2000,
                seed=5,
            )
        )
        assert best.candidate == target
        curve = history.best_fitness_curve()
        assert all(later >= earlier for earlier, later in zip(curve, curve[1:]))

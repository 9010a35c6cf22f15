"""evoloom: a generational evolutionary-computation engine."""

from evoloom.evolution.engine import (
    ElapsedTime,
    EngineConfig,
    EngineState,
    EvaluationCoordinator,
    EvolutionEngine,
    EvolutionObserver,
    EvolutionResult,
    GenerationCount,
    GenerationStatistics,
    HistoryObserver,
    LoggingObserver,
    Stagnation,
    TargetCandidate,
    TargetFitness,
    TerminationCondition,
    UserAbort,
)
from evoloom.evolution.factories import CandidateFactory, StringFactory
from evoloom.evolution.fitness import FitnessEvaluator
from evoloom.evolution.models import EvaluatedCandidate, Population, rank_population
from evoloom.evolution.operators import (
    EvolutionaryOperator,
    EvolutionPipeline,
    IdentityOperator,
    SplitEvolution,
    StringCrossover,
    StringMutation,
)
from evoloom.evolution.selection import (
    RouletteWheelSelection,
    SelectionStrategy,
    TournamentSelection,
    TruncationSelection,
)
from evoloom.exceptions import (
    ConfigurationError,
    EvaluationError,
    EvoLoomError,
    EvolutionError,
    ObserverError,
    OperatorError,
)
from evoloom.utils.numbers import ConstantGenerator, NumberGenerator, UniformGenerator
from evoloom.utils.rng import RandomSource, create_random_source

__version__ = "0.1.0"

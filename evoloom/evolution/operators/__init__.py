from evoloom.evolution.operators.base import (
    EvolutionaryOperator,
    IdentityOperator,
    apply_checked,
)
from evoloom.evolution.operators.pipeline import EvolutionPipeline
from evoloom.evolution.operators.split import SplitEvolution
from evoloom.evolution.operators.strings import StringCrossover, StringMutation

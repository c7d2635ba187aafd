"""
evostream/engine/

Generation step, evaluation and the evolution stream.
"""

from .evolution import EvolutionDurations, EvolutionResult, EvolutionStart
from .evaluator import ConcurrentEvaluator, Evaluator, SerialEvaluator
from .stream import EvolutionIterator, EvolutionStream, best_phenotype, best_result
from .limits import (
    Limit,
    FixedGenerationLimit,
    FitnessThresholdLimit,
    SteadyFitnessLimit,
    ExecutionTimeLimit,
    PopulationConvergenceLimit,
    by_fixed_generation,
    by_fitness_threshold,
    by_steady_fitness,
    by_execution_time,
    by_population_convergence,
)
from .engine import Engine

__all__ = [
    "EvolutionDurations",
    "EvolutionResult",
    "EvolutionStart",
    "Evaluator",
    "SerialEvaluator",
    "ConcurrentEvaluator",
    "EvolutionIterator",
    "EvolutionStream",
    "best_phenotype",
    "best_result",
    "Limit",
    "FixedGenerationLimit",
    "FitnessThresholdLimit",
    "SteadyFitnessLimit",
    "ExecutionTimeLimit",
    "PopulationConvergenceLimit",
    "by_fixed_generation",
    "by_fitness_threshold",
    "by_steady_fitness",
    "by_execution_time",
    "by_population_convergence",
    "Engine",
]

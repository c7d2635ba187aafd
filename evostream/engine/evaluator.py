"""
evostream/engine/evaluator.py

Fitness evaluation of a population.

Evaluation is embarrassingly parallel: every phenotype is measured
independently. The ConcurrentEvaluator fans the work out to an executor
and waits for all of it before the generation step continues.

Only phenotypes without a cached fitness are evaluated. Phenotypes with
identical genotypes in one batch share a single evaluation.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor, wait
from typing import Any, Dict, List

from evostream.genetics import FitnessFunction, Genotype
from evostream.util import ISeq, require_non_null

logger = logging.getLogger(__name__)


class Evaluator(ABC):
    """Turns a population into an evaluated population of the same order."""

    def __init__(self, fitness_function: FitnessFunction):
        self.fitness_function = require_non_null(fitness_function, "fitness_function")

    def evaluate(self, population: ISeq) -> ISeq:
        require_non_null(population, "population")

        pending: Dict[Genotype, List[int]] = {}
        for index, phenotype in enumerate(population):
            if not phenotype.is_evaluated():
                pending.setdefault(phenotype.genotype, []).append(index)

        if not pending:
            return population

        genotypes = list(pending)
        fitnesses = self._evaluate_all(genotypes)

        evaluated = population.copy()
        for genotype, fitness in zip(genotypes, fitnesses):
            if fitness is None:
                raise ValueError("Fitness function returned None")
            for index in pending[genotype]:
                evaluated[index] = evaluated[index].with_fitness(fitness)

        logger.debug(f"Evaluated {len(genotypes)} genotypes for {len(population)} phenotypes")
        return evaluated.to_iseq()

    def __call__(self, population: ISeq) -> ISeq:
        return self.evaluate(population)

    @abstractmethod
    def _evaluate_all(self, genotypes: List[Genotype]) -> List[Any]:
        pass


class SerialEvaluator(Evaluator):
    """Evaluates in the calling thread."""

    def _evaluate_all(self, genotypes):
        return [self.fitness_function(genotype) for genotype in genotypes]


class ConcurrentEvaluator(Evaluator):
    """
    Evaluates on an executor.

    The executor is borrowed, not owned: shutting it down is up to the
    caller. The first exception raised by the fitness function is
    re-raised after all submitted work has finished.
    """

    def __init__(self, fitness_function: FitnessFunction, executor: Executor):
        super().__init__(fitness_function)
        self.executor = require_non_null(executor, "executor")

    def _evaluate_all(self, genotypes):
        futures = [self.executor.submit(self.fitness_function, g) for g in genotypes]
        wait(futures)
        return [future.result() for future in futures]

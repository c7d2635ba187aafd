"""
evostream/engine/engine.py

The generation step.

One call of Engine.evolve turns an EvolutionStart into an EvolutionResult:

1. Evaluate the start population (only phenotypes without fitness)
2. Select offspring parents and survivors from it
3. Alter the offspring parents (crossover, mutation)
4. Replace invalid and over-aged individuals by new random ones
5. Evaluate the merged population
6. Track the best phenotype found so far

The engine holds no per-run state; all of it travels in EvolutionStart and
EvolutionResult. The same engine can drive any number of streams.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from itertools import chain
from typing import Callable, Optional, Tuple, Union

import numpy as np

from evostream.alteration import Alterer, Mutator, SinglePointCrossover
from evostream.config import EngineConfig
from evostream.genetics import (
    FitnessFunction,
    Genotype,
    GenotypeFactory,
    Phenotype,
    as_factory,
)
from evostream.selection import Selector, TournamentSelector
from evostream.util import ISeq, random_registry, require_non_null

from .evaluator import ConcurrentEvaluator, Evaluator, SerialEvaluator
from .evolution import EvolutionDurations, EvolutionResult, EvolutionStart
from .stream import EvolutionStream

logger = logging.getLogger(__name__)

Validator = Callable[[Genotype], bool]


class Engine:
    """
    Evolution engine.

    Example:
        engine = Engine(
            fitness_function=lambda gt: gt.chromosome().bit_count(),
            genotype_factory=Genotype.of(BitChromosome.of(20)),
        )
        with engine:
            best = best_phenotype(engine.stream().limit(by_fixed_generation(100)))
    """

    def __init__(
        self,
        fitness_function: FitnessFunction,
        genotype_factory: Union[Genotype, GenotypeFactory],
        config: Optional[EngineConfig] = None,
        offspring_selector: Optional[Selector] = None,
        survivors_selector: Optional[Selector] = None,
        alterer: Optional[Alterer] = None,
        validator: Optional[Validator] = None,
        evaluator: Optional[Evaluator] = None,
    ):
        self.fitness_function = require_non_null(fitness_function, "fitness_function")
        self.genotype_factory = as_factory(genotype_factory)
        self.config = config if config is not None else EngineConfig()
        self.optimize = self.config.optimize_direction

        self.offspring_selector = offspring_selector or TournamentSelector(3)
        self.survivors_selector = survivors_selector or TournamentSelector(3)
        self.alterer = alterer or Alterer.compose(SinglePointCrossover(0.2), Mutator(0.15))
        self.validator = validator or Genotype.is_valid

        self._executor: Optional[ThreadPoolExecutor] = None
        if evaluator is not None:
            self.evaluator = evaluator
        elif self.config.max_workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers,
                thread_name_prefix="evostream-eval",
            )
            self.evaluator = ConcurrentEvaluator(fitness_function, self._executor)
        else:
            self.evaluator = SerialEvaluator(fitness_function)

        logger.info(
            f"Engine ready: population={self.config.population_size}, "
            f"offspring={self.config.offspring_count}, "
            f"survivors={self.config.survivors_count}, "
            f"optimize={self.optimize.value}, workers={self.config.max_workers}"
        )

    # ==================== Population ====================

    def new_phenotype(
        self,
        generation: int,
        random: Optional[np.random.Generator] = None,
    ) -> Phenotype:
        """Unevaluated phenotype with a fresh random genotype."""
        rng = random_registry.resolve(random)
        return Phenotype(self.genotype_factory(rng), generation)

    def _new_valid_phenotype(self, generation: int, rng: np.random.Generator) -> Phenotype:
        phenotype = self.new_phenotype(generation, rng)
        retries = self.config.individual_creation_retries
        while retries > 0 and not self.validator(phenotype.genotype):
            phenotype = self.new_phenotype(generation, rng)
            retries -= 1
        return phenotype

    def initial_population(
        self,
        generation: int = 1,
        random: Optional[np.random.Generator] = None,
    ) -> ISeq:
        rng = random_registry.resolve(random)
        return ISeq.generate(
            lambda: self._new_valid_phenotype(generation, rng),
            self.config.population_size,
        )

    def initial_start(
        self,
        population: Optional[ISeq] = None,
        generation: int = 1,
        random: Optional[np.random.Generator] = None,
    ) -> EvolutionStart:
        """
        Start of a run. A given population is topped up with new random
        phenotypes or cut down to the configured population size.
        """
        rng = random_registry.resolve(random)
        size = self.config.population_size
        if population is None:
            return EvolutionStart(self.initial_population(generation, rng), generation)

        phenotypes = [
            p if isinstance(p, Phenotype) else Phenotype(p, generation)
            for p in population
        ][:size]
        while len(phenotypes) < size:
            phenotypes.append(self._new_valid_phenotype(generation, rng))
        return EvolutionStart(ISeq.from_iterable(phenotypes), generation)

    # ==================== Generation Step ====================

    def evolve(
        self,
        start: EvolutionStart,
        random: Optional[np.random.Generator] = None,
    ) -> EvolutionResult:
        """Run one generation step."""
        require_non_null(start, "start")
        rng = random_registry.resolve(random)
        generation = start.generation
        evolve_start = time.perf_counter()

        t = time.perf_counter()
        population = self.evaluator.evaluate(start.population)
        evaluation = time.perf_counter() - t

        t = time.perf_counter()
        offspring = self.offspring_selector.select(
            population, self.config.offspring_count, self.optimize, rng
        )
        offspring_selection = time.perf_counter() - t

        t = time.perf_counter()
        survivors = self.survivors_selector.select(
            population, self.config.survivors_count, self.optimize, rng
        )
        survivors_selection = time.perf_counter() - t

        t = time.perf_counter()
        altered = self.alterer.alter(offspring, generation, rng)
        offspring_alter = time.perf_counter() - t

        offspring, offspring_invalid, offspring_killed = self._filter(
            altered.population, generation, rng
        )
        survivors, survivors_invalid, survivors_killed = self._filter(
            survivors, generation, rng
        )

        t = time.perf_counter()
        population = self.evaluator.evaluate(
            ISeq.from_iterable(chain(offspring, survivors))
        )
        evaluation += time.perf_counter() - t

        best = self._best_of(population)
        if start.best_phenotype is not None and start.best_phenotype.is_evaluated():
            if self.optimize.compare(start.best_phenotype.fitness, best.fitness) > 0:
                best = start.best_phenotype

        durations = EvolutionDurations(
            offspring_selection=offspring_selection,
            survivors_selection=survivors_selection,
            offspring_alter=offspring_alter,
            evaluation=evaluation,
            evolve=time.perf_counter() - evolve_start,
        )
        result = EvolutionResult(
            optimize=self.optimize,
            population=population,
            generation=generation,
            best_phenotype=best,
            alter_count=altered.alterations,
            kill_count=offspring_killed + survivors_killed,
            invalid_count=offspring_invalid + survivors_invalid,
            durations=durations,
        )
        logger.debug(
            f"Generation {generation}: best={best.fitness}, "
            f"altered={result.alter_count}, killed={result.kill_count}, "
            f"invalid={result.invalid_count}, took {durations.evolve:.4f}s"
        )
        return result

    def __call__(self, start: EvolutionStart) -> EvolutionResult:
        return self.evolve(start)

    def evolve_population(
        self,
        population: ISeq,
        generation: int,
        random: Optional[np.random.Generator] = None,
    ) -> EvolutionResult:
        return self.evolve(EvolutionStart(population, generation), random)

    def _best_of(self, population: ISeq) -> Phenotype:
        best = population[0]
        for phenotype in population:
            if self.optimize.compare(phenotype.fitness, best.fitness) > 0:
                best = phenotype
        return best

    def _filter(
        self,
        population: ISeq,
        generation: int,
        rng: np.random.Generator,
    ) -> Tuple[ISeq, int, int]:
        """Replace invalid and over-aged phenotypes; count both."""
        invalid = 0
        killed = 0
        result = population.copy()
        for i, phenotype in enumerate(population):
            if not self.validator(phenotype.genotype):
                result[i] = self._new_valid_phenotype(generation, rng)
                invalid += 1
            elif phenotype.age(generation) > self.config.max_phenotype_age:
                result[i] = self._new_valid_phenotype(generation, rng)
                killed += 1
        return result.to_iseq(), invalid, killed

    # ==================== Streams ====================

    def stream(
        self,
        population: Optional[ISeq] = None,
        generation: int = 1,
        random: Optional[np.random.Generator] = None,
    ) -> EvolutionStream:
        """
        Infinite stream of generation results.

        Random numbers come from, in order of precedence: ``random``, a
        generator seeded with ``config.seed``, the random registry at the
        time each step runs. A seeded stream starts every iteration with a
        new generator, so repeated iterations give identical runs.
        """
        seed = self.config.seed if random is None else None

        def run():
            rng = np.random.default_rng(seed) if seed is not None else random
            return (
                lambda: self.initial_start(population, generation, rng),
                lambda start: self.evolve(start, rng),
            )

        return EvolutionStream.of_runs(run)

    def stream_from(
        self,
        start: EvolutionStart,
        random: Optional[np.random.Generator] = None,
    ) -> EvolutionStream:
        """Stream continuing from a given start, e.g. ``result.next()``."""
        require_non_null(start, "start")
        return EvolutionStream(lambda: start, lambda s: self.evolve(s, random))

    # ==================== Lifecycle ====================

    def close(self) -> None:
        """Shut down the evaluation threads owned by this engine."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
            logger.info("Engine evaluation executor shut down")

    def __enter__(self) -> "Engine":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Engine(population_size={self.config.population_size}, "
            f"optimize={self.optimize.value}, "
            f"offspring_selector={self.offspring_selector!r}, "
            f"survivors_selector={self.survivors_selector!r}, "
            f"alterer={self.alterer!r})"
        )

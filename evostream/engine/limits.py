"""
evostream/engine/limits.py

Predicates for ``EvolutionStream.limit``. A limit returns True while the
evolution should proceed.

Limits that keep state (generation counters, best-so-far tracking, start
times) are copied by the stream for every run, so one limit instance can
be shared between runs.
"""

from __future__ import annotations

import math
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import numpy as np

from .evolution import EvolutionResult


class Limit(ABC):
    """Base class for stream limits."""

    @abstractmethod
    def __call__(self, result: EvolutionResult) -> bool:
        pass


class FixedGenerationLimit(Limit):
    """Proceed for exactly ``generations`` results."""

    def __init__(self, generations: int):
        if generations < 1:
            raise ValueError(f"generations must be positive: {generations}")
        self.generations = generations
        self._seen = 0

    def __call__(self, result):
        self._seen += 1
        return self._seen < self.generations


class FitnessThresholdLimit(Limit):
    """Proceed while the best fitness has not reached the threshold."""

    def __init__(self, threshold: Any):
        self.threshold = threshold

    def __call__(self, result):
        return result.optimize.compare(result.best_fitness, self.threshold) < 0


class SteadyFitnessLimit(Limit):
    """
    Proceed until the best fitness did not improve for ``generations``
    consecutive results.
    """

    def __init__(self, generations: int):
        if generations < 1:
            raise ValueError(f"generations must be positive: {generations}")
        self.generations = generations
        self._best: Optional[Any] = None
        self._stable = 0

    def __call__(self, result):
        fitness = result.best_fitness
        if self._best is None or result.optimize.compare(fitness, self._best) > 0:
            self._best = fitness
            self._stable = 0
        else:
            self._stable += 1
        return self._stable < self.generations


class ExecutionTimeLimit(Limit):
    """Proceed until ``seconds`` have passed since the first result."""

    def __init__(self, seconds: float, clock: Optional[Callable[[], float]] = None):
        if seconds < 0:
            raise ValueError(f"seconds must not be negative: {seconds}")
        self.seconds = seconds
        self.clock = clock or time.monotonic
        self._started: Optional[float] = None

    def __call__(self, result):
        now = self.clock()
        if self._started is None:
            self._started = now
        return now - self._started < self.seconds


class PopulationConvergenceLimit(Limit):
    """
    Proceed while the best fitness of the population differs from the
    mean fitness by more than epsilon.
    """

    def __init__(self, epsilon: float):
        if epsilon < 0 or math.isnan(epsilon):
            raise ValueError(f"epsilon must not be negative: {epsilon}")
        self.epsilon = epsilon

    def __call__(self, result):
        fitness = np.array([float(p.fitness) for p in result.population])
        best = float(result.population_best().fitness)
        return abs(best - float(fitness.mean())) > self.epsilon


def by_fixed_generation(generations: int) -> Limit:
    return FixedGenerationLimit(generations)


def by_fitness_threshold(threshold: Any) -> Limit:
    return FitnessThresholdLimit(threshold)


def by_steady_fitness(generations: int) -> Limit:
    return SteadyFitnessLimit(generations)


def by_execution_time(seconds: float, clock: Optional[Callable[[], float]] = None) -> Limit:
    return ExecutionTimeLimit(seconds, clock)


def by_population_convergence(epsilon: float) -> Limit:
    return PopulationConvergenceLimit(epsilon)

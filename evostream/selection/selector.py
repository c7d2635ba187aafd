"""
evostream/selection/selector.py

Selection strategies.

A selector picks ``count`` individuals (with repetition) from an evaluated
population. The engine uses one selector for the parents of the offspring
and one for the survivors.

Fitness-proportional selectors:
- RouletteWheelSelector: ``count`` independent spins
- StochasticUniversalSelector: one spin, ``count`` equally spaced pointers
  (same expected frequencies, lower variance)

Rank-based selectors:
- TournamentSelector: best of ``size`` random contestants
- TruncationSelector: the best individuals only
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from evostream.genetics import Optimize, Phenotype
from evostream.util import ISeq, random_registry, sort_seq

logger = logging.getLogger(__name__)


def _check_evaluated(population: ISeq) -> None:
    if not population.for_all(Phenotype.is_evaluated):
        raise ValueError("Selection requires an evaluated population")


def sort_best_first(population: ISeq, optimize: Optimize) -> ISeq:
    """Population ordered best-first; the input is left untouched."""
    order = sort_seq(
        population,
        lambda a, b: optimize.compare(b.fitness, a.fitness),
    )
    return ISeq.from_iterable(population[int(i)] for i in order)


class Selector(ABC):
    """
    Abstract base for selectors.

    Subclasses implement ``_select``; argument checking and random source
    resolution happen here.
    """

    def select(
        self,
        population: ISeq,
        count: int,
        optimize: Optimize,
        random: Optional[np.random.Generator] = None,
    ) -> ISeq:
        """
        Select count individuals from population.

        Args:
            population: Evaluated phenotypes
            count: Number of individuals to select (may exceed the population)
            optimize: Optimization direction
            random: Generator to use; falls back to random_registry

        Returns:
            ISeq of selected phenotypes
        """
        if population is None:
            raise TypeError("population must not be None")
        if count < 0:
            raise ValueError(f"Selection count must not be negative: {count}")
        if count == 0:
            return ISeq.empty()
        if len(population) == 0:
            raise ValueError(f"Cannot select {count} individuals from an empty population")
        _check_evaluated(population)

        return self._select(population, count, optimize, random_registry.resolve(random))

    @abstractmethod
    def _select(
        self,
        population: ISeq,
        count: int,
        optimize: Optimize,
        rng: np.random.Generator,
    ) -> ISeq:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ProbabilitySelector(Selector):
    """
    Base for fitness-proportional selection.

    Fitness values are turned into selection probabilities:
    - MAXIMUM: fitness, shifted up if any value is negative
    - MINIMUM: distance to the largest fitness
    A population without any usable weight (e.g. all fitness zero) is
    selected uniformly.
    """

    def probabilities(self, population: ISeq, optimize: Optimize) -> np.ndarray:
        fitness = np.array([float(p.fitness) for p in population], dtype=float)
        n = len(fitness)

        if optimize is Optimize.MINIMUM:
            weights = fitness.max() - fitness
        else:
            weights = fitness - min(fitness.min(), 0.0)

        total = weights.sum()
        if not np.isfinite(total) or total <= 0.0:
            logger.debug(f"Zero total fitness over {n} individuals, selecting uniformly")
            return np.full(n, 1.0 / n)

        return weights / total

    @staticmethod
    def _pick(cumulative: np.ndarray, points: np.ndarray) -> np.ndarray:
        indices = np.searchsorted(cumulative, points, side="right")
        return np.minimum(indices, len(cumulative) - 1)


class RouletteWheelSelector(ProbabilitySelector):
    """Independent fitness-proportional draws."""

    def _select(self, population, count, optimize, rng):
        ordered = sort_best_first(population, optimize)
        cumulative = np.cumsum(self.probabilities(ordered, optimize))
        indices = self._pick(cumulative, rng.random(count) * cumulative[-1])
        return ISeq.from_iterable(ordered[int(i)] for i in indices)


class StochasticUniversalSelector(ProbabilitySelector):
    """
    Stochastic universal sampling (Baker, 1987).

    The population, ordered best-first, is laid out on a line; each
    individual owns an interval as long as its selection probability.
    One random offset in ``[0, 1/count)`` places the first of ``count``
    pointers, spaced ``1/count`` apart. Each pointer selects the individual
    whose interval contains it.
    """

    def _select(self, population, count, optimize, rng):
        ordered = sort_best_first(population, optimize)
        cumulative = np.cumsum(self.probabilities(ordered, optimize))

        delta = cumulative[-1] / count
        offset = rng.uniform(0.0, delta)
        pointers = offset + delta * np.arange(count)

        indices = self._pick(cumulative, pointers)
        return ISeq.from_iterable(ordered[int(i)] for i in indices)


class TournamentSelector(Selector):
    """Each selection is the best of ``size`` uniformly drawn contestants."""

    def __init__(self, size: int = 2):
        if size < 1:
            raise ValueError(f"Tournament size must be at least one: {size}")
        self.size = size

    def _select(self, population, count, optimize, rng):
        n = len(population)
        selected = []
        for _ in range(count):
            contestants = rng.integers(n, size=self.size)
            winner = population[int(contestants[0])]
            for index in contestants[1:]:
                challenger = population[int(index)]
                if optimize.compare(challenger.fitness, winner.fitness) > 0:
                    winner = challenger
            selected.append(winner)
        return ISeq.from_iterable(selected)

    def __repr__(self) -> str:
        return f"TournamentSelector(size={self.size})"


class TruncationSelector(Selector):
    """
    Selects the best individuals, cycling through the ``worst_rank`` best
    when more are requested than available.
    """

    def __init__(self, worst_rank: Optional[int] = None):
        if worst_rank is not None and worst_rank < 1:
            raise ValueError(f"Worst rank must be at least one: {worst_rank}")
        self.worst_rank = worst_rank

    def _select(self, population, count, optimize, rng):
        ordered = sort_best_first(population, optimize)
        k = len(ordered) if self.worst_rank is None else min(self.worst_rank, len(ordered))
        return ISeq.from_iterable(ordered[i % k] for i in range(count))

    def __repr__(self) -> str:
        return f"TruncationSelector(worst_rank={self.worst_rank})"

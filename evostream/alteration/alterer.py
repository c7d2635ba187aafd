"""
evostream/alteration/alterer.py

Alterers produce variation: they take the selected offspring parents and
return a population of the same size in which some individuals were
changed by crossover or mutation.

Changed individuals are new, unevaluated phenotypes born in the current
generation. Unchanged individuals are passed through as they are, keeping
their cached fitness.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from evostream.util import ISeq, random_registry


@dataclass(frozen=True)
class AltererResult:
    """Altered population and the number of alterations performed."""

    population: ISeq
    alterations: int = 0

    def __post_init__(self):
        if self.alterations < 0:
            raise ValueError(f"Alteration count must not be negative: {self.alterations}")


class Alterer(ABC):
    """Abstract base for crossover and mutation operators."""

    def alter(
        self,
        population: ISeq,
        generation: int,
        random: Optional[np.random.Generator] = None,
    ) -> AltererResult:
        """
        Alter the given population.

        Args:
            population: Phenotypes selected as offspring parents
            generation: Birth generation for newly created phenotypes
            random: Generator to use; falls back to random_registry

        Returns:
            AltererResult with a population of the same length
        """
        if population is None:
            raise TypeError("population must not be None")
        if len(population) == 0:
            return AltererResult(population, 0)
        return self._alter(population, generation, random_registry.resolve(random))

    @abstractmethod
    def _alter(
        self,
        population: ISeq,
        generation: int,
        rng: np.random.Generator,
    ) -> AltererResult:
        pass

    def and_then(self, other: "Alterer") -> "CompositeAlterer":
        return CompositeAlterer([self, other])

    @staticmethod
    def compose(*alterers: "Alterer") -> "Alterer":
        if len(alterers) == 1:
            return alterers[0]
        return CompositeAlterer(alterers)


class CompositeAlterer(Alterer):
    """Applies alterers in order; alteration counts add up."""

    def __init__(self, alterers: Sequence[Alterer]):
        flat: List[Alterer] = []
        for alterer in alterers:
            if alterer is None:
                raise TypeError("alterer must not be None")
            if isinstance(alterer, CompositeAlterer):
                flat.extend(alterer.alterers)
            else:
                flat.append(alterer)
        self.alterers = tuple(flat)

    def _alter(self, population, generation, rng):
        alterations = 0
        for alterer in self.alterers:
            result = alterer.alter(population, generation, rng)
            population = result.population
            alterations += result.alterations
        return AltererResult(population, alterations)

    def __repr__(self) -> str:
        return f"CompositeAlterer({', '.join(map(repr, self.alterers))})"

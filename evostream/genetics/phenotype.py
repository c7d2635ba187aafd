"""
evostream/genetics/phenotype.py

A phenotype is a genotype that has been (or will be) measured: it carries
the generation it was born in and, once evaluated, its fitness.

Fitness is computed at most once. Evaluating an evaluated phenotype returns
it unchanged; the cached value is authoritative.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from .genotype import Genotype

FitnessFunction = Callable[[Genotype], Any]


@dataclass(frozen=True)
class Phenotype:
    """Genotype + birth generation + cached fitness (None = not evaluated)."""

    genotype: Genotype
    generation: int
    fitness: Optional[Any] = None

    def __post_init__(self):
        if self.generation < 0:
            raise ValueError(f"Generation must not be negative: {self.generation}")

    @classmethod
    def of(
        cls,
        genotype: Genotype,
        generation: int,
        fitness: Optional[Any] = None,
    ) -> "Phenotype":
        return cls(genotype, generation, fitness)

    def is_evaluated(self) -> bool:
        return self.fitness is not None

    def evaluate(self, fitness_function: FitnessFunction) -> "Phenotype":
        if self.fitness is not None:
            return self
        return replace(self, fitness=fitness_function(self.genotype))

    def with_fitness(self, fitness: Any) -> "Phenotype":
        return replace(self, fitness=fitness)

    def is_valid(self) -> bool:
        return self.genotype.is_valid()

    def age(self, current_generation: int) -> int:
        return current_generation - self.generation

    def __repr__(self) -> str:
        return (
            f"Phenotype(generation={self.generation}, "
            f"fitness={self.fitness}, genotype={self.genotype})"
        )

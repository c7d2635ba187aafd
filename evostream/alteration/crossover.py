"""
evostream/alteration/crossover.py

Recombination operators.

The population is shuffled and consecutive individuals are paired. Each
pair is recombined with the configured probability: one chromosome index
is picked and both parents exchange allele ranges in it, giving two
children that replace the parents.
"""

from __future__ import annotations

from abc import abstractmethod

import numpy as np

from evostream.genetics import Phenotype
from evostream.util import MSeq, require_probability

from .alterer import Alterer, AltererResult


class Crossover(Alterer):
    """Base for two-parent recombination. Counts altered individuals."""

    def __init__(self, probability: float = 0.2):
        self.probability = require_probability(probability)

    def _alter(self, population, generation, rng):
        n = len(population)
        if n < 2 or self.probability == 0.0:
            return AltererResult(population, 0)

        result = population.copy()
        order = MSeq.from_iterable(range(n)).shuffle(rng)

        alterations = 0
        for k in range(0, n - 1, 2):
            if rng.random() >= self.probability:
                continue
            i, j = order[k], order[k + 1]
            genotype1 = result[i].genotype
            genotype2 = result[j].genotype
            if len(genotype1) != len(genotype2):
                raise ValueError("Cannot recombine genotypes of different shape")

            c = int(rng.integers(len(genotype1)))
            alleles1 = genotype1[c].alleles.copy()
            alleles2 = genotype2[c].alleles.copy()
            if not self.crossover(alleles1, alleles2, rng):
                continue

            result[i] = Phenotype(
                genotype1.with_chromosome(c, genotype1[c].with_alleles(alleles1.to_iseq())),
                generation,
            )
            result[j] = Phenotype(
                genotype2.with_chromosome(c, genotype2[c].with_alleles(alleles2.to_iseq())),
                generation,
            )
            alterations += 2

        return AltererResult(result.to_iseq(), alterations)

    @abstractmethod
    def crossover(self, that: MSeq, other: MSeq, rng: np.random.Generator) -> bool:
        """Recombine the two allele sequences in place; False if nothing changed."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(probability={self.probability})"


class SinglePointCrossover(Crossover):
    """
    Exchanges the tails after a random cut point.

        that:  [a a a a|a a a]      [a a a a|b b b]
        other: [b b b b|b b b]  ->  [b b b b|a a a]
    """

    def crossover(self, that, other, rng):
        length = min(len(that), len(other))
        if length < 2:
            return False
        index = int(rng.integers(1, length))
        that.swap_range(index, length, other, index)
        return True


class UniformCrossover(Crossover):
    """Exchanges each allele position independently with swap_probability."""

    def __init__(self, probability: float = 0.2, swap_probability: float = 0.5):
        super().__init__(probability)
        self.swap_probability = require_probability(swap_probability, "swap_probability")

    def crossover(self, that, other, rng):
        swapped = False
        for i in range(min(len(that), len(other))):
            if rng.random() < self.swap_probability:
                that.swap_range(i, i + 1, other, i)
                swapped = True
        return swapped

    def __repr__(self) -> str:
        return (
            f"UniformCrossover(probability={self.probability}, "
            f"swap_probability={self.swap_probability})"
        )

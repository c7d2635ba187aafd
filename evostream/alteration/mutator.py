"""
evostream/alteration/mutator.py

Mutation operators. Each allele of each chromosome is considered
independently and altered with the configured probability.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from evostream.genetics import Chromosome, Genotype, Phenotype
from evostream.util import MSeq, require_probability

from .alterer import Alterer, AltererResult


class Mutator(Alterer):
    """
    Replaces alleles with fresh random ones.

    Subclasses override ``mutate_chromosome`` to change how an allele is
    altered; the loop over population, genotype and chromosome stays here.
    The alteration count is the number of altered alleles.
    """

    def __init__(self, probability: float = 0.01):
        self.probability = require_probability(probability)

    def _alter(self, population, generation, rng):
        if self.probability == 0.0:
            return AltererResult(population, 0)

        result = population.copy()
        alterations = 0
        for i, phenotype in enumerate(population):
            genotype, count = self.mutate_genotype(phenotype.genotype, rng)
            if count > 0:
                result[i] = Phenotype(genotype, generation)
                alterations += count

        return AltererResult(result.to_iseq(), alterations)

    def mutate_genotype(
        self,
        genotype: Genotype,
        rng: np.random.Generator,
    ) -> Tuple[Genotype, int]:
        chromosomes = genotype.chromosomes.copy()
        total = 0
        for i, chromosome in enumerate(genotype):
            mutated, count = self.mutate_chromosome(chromosome, rng)
            if count > 0:
                chromosomes[i] = mutated
                total += count

        if total == 0:
            return genotype, 0
        return Genotype(chromosomes.to_iseq()), total

    def mutate_chromosome(
        self,
        chromosome: Chromosome,
        rng: np.random.Generator,
    ) -> Tuple[Chromosome, int]:
        alleles = chromosome.alleles.copy()
        count = 0
        for i in range(len(alleles)):
            if rng.random() < self.probability:
                alleles[i] = self.mutate_allele(chromosome, alleles[i], rng)
                count += 1

        if count == 0:
            return chromosome, 0
        return chromosome.with_alleles(alleles.to_iseq()), count

    def mutate_allele(self, chromosome: Chromosome, allele, rng: np.random.Generator):
        return chromosome.new_allele(rng)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(probability={self.probability})"


class GaussianMutator(Mutator):
    """
    Adds gaussian noise to numeric alleles, clipped to the chromosome bounds.

    The standard deviation is ``sigma * (max - min)``.
    Non-numeric chromosomes are left alone.
    """

    def __init__(self, probability: float = 0.05, sigma: float = 0.1):
        super().__init__(probability)
        if sigma <= 0:
            raise ValueError(f"Sigma must be positive: {sigma}")
        self.sigma = sigma

    def mutate_chromosome(self, chromosome, rng):
        if not chromosome.numeric:
            return chromosome, 0
        return super().mutate_chromosome(chromosome, rng)

    def mutate_allele(self, chromosome, allele, rng):
        scale = self.sigma * (chromosome.max - chromosome.min)
        return chromosome.clip(allele + rng.normal(0.0, scale))


class SwapMutator(Mutator):
    """Swaps alleles with a random position inside the same chromosome."""

    def mutate_chromosome(self, chromosome, rng):
        if len(chromosome) < 2:
            return chromosome, 0

        alleles: MSeq = chromosome.alleles.copy()
        count = 0
        for i in range(len(alleles)):
            if rng.random() < self.probability:
                alleles.swap(i, int(rng.integers(len(alleles))))
                count += 1

        if count == 0:
            return chromosome, 0
        return chromosome.with_alleles(alleles.to_iseq()), count

"""
evostream/genetics/

Solution encodings.

The genotype is the encoding; the phenotype is the encoding plus what we
learned by evaluating it.
"""

from .chromosome import (
    Chromosome,
    BitChromosome,
    DoubleChromosome,
    IntegerChromosome,
    chromosome_from_dict,
    register_chromosome,
)
from .genotype import Genotype, GenotypeFactory, as_factory
from .optimize import Optimize, natural_compare
from .phenotype import FitnessFunction, Phenotype

__all__ = [
    "Chromosome",
    "BitChromosome",
    "DoubleChromosome",
    "IntegerChromosome",
    "chromosome_from_dict",
    "register_chromosome",
    "Genotype",
    "GenotypeFactory",
    "as_factory",
    "Optimize",
    "natural_compare",
    "FitnessFunction",
    "Phenotype",
]

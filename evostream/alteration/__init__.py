"""
evostream/alteration/

Variation operators: crossover recombines parents, mutation perturbs
children.
"""

from .alterer import Alterer, AltererResult, CompositeAlterer
from .crossover import Crossover, SinglePointCrossover, UniformCrossover
from .mutator import GaussianMutator, Mutator, SwapMutator

__all__ = [
    "Alterer",
    "AltererResult",
    "CompositeAlterer",
    "Crossover",
    "SinglePointCrossover",
    "UniformCrossover",
    "Mutator",
    "GaussianMutator",
    "SwapMutator",
]

"""
evostream/genetics/genotype.py

A genotype encodes one candidate solution as an ordered sequence of
chromosomes. The genotype is what evolves; its fitness is what we measure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, Optional, Union

import numpy as np

from evostream.util import ISeq, random_registry

from .chromosome import Chromosome, chromosome_from_dict


@dataclass(frozen=True)
class Genotype:
    """Immutable, non-empty sequence of chromosomes."""

    chromosomes: ISeq

    def __post_init__(self):
        if len(self.chromosomes) == 0:
            raise ValueError("Genotype needs at least one chromosome")

    @classmethod
    def of(cls, *chromosomes: Chromosome) -> "Genotype":
        return cls(ISeq.of(*chromosomes))

    def __len__(self) -> int:
        return len(self.chromosomes)

    def __iter__(self) -> Iterator[Chromosome]:
        return iter(self.chromosomes)

    def __getitem__(self, index: int) -> Chromosome:
        return self.chromosomes[index]

    def chromosome(self) -> Chromosome:
        """The first chromosome, for the common single-chromosome case."""
        return self.chromosomes[0]

    @property
    def gene_count(self) -> int:
        return sum(len(c) for c in self.chromosomes)

    def is_valid(self) -> bool:
        return self.chromosomes.for_all(lambda c: c.is_valid())

    def with_chromosome(self, index: int, chromosome: Chromosome) -> "Genotype":
        chromosomes = self.chromosomes.copy()
        chromosomes[index] = chromosome
        return Genotype(chromosomes.to_iseq())

    def new_instance(self, random: Optional[np.random.Generator] = None) -> "Genotype":
        """Random genotype with the same shape (chromosome types and lengths)."""
        rng = random_registry.resolve(random)
        return Genotype(self.chromosomes.map(lambda c: c.new_instance(rng)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Genotype",
            "chromosomes": [c.to_dict() for c in self.chromosomes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Genotype":
        return cls(ISeq.from_iterable(
            chromosome_from_dict(c) for c in data["chromosomes"]
        ))


GenotypeFactory = Callable[[np.random.Generator], Genotype]


def as_factory(source: Union[Genotype, GenotypeFactory]) -> GenotypeFactory:
    """
    Normalize a genotype prototype or a factory callable to a factory.

    A prototype yields random genotypes of its own shape.
    """
    if source is None:
        raise TypeError("genotype factory must not be None")
    if isinstance(source, Genotype):
        return source.new_instance
    if not callable(source):
        raise TypeError(f"Not a genotype factory: {source!r}")
    return source

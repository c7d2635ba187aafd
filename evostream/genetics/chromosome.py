"""
evostream/genetics/chromosome.py

Chromosome representations.

A chromosome is a fixed-length, immutable run of alleles. It knows:
- How to draw a fresh random allele (for initialization and mutation)
- Which alleles are valid
- How to rebuild itself around a different allele sequence

Alterers work on the allele sequence (copy to MSeq, edit, to_iseq) and hand
the result back through ``with_alleles``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, Optional, Type

import numpy as np

from evostream.util import ISeq, random_registry, require_probability

CHROMOSOME_TYPES: Dict[str, Type["Chromosome"]] = {}


def register_chromosome(cls: Type["Chromosome"]) -> Type["Chromosome"]:
    """Make a chromosome class known to ``chromosome_from_dict``."""
    CHROMOSOME_TYPES[cls.__name__] = cls
    return cls


class Chromosome(ABC):
    """
    Abstract base for chromosome representations.

    A chromosome must support:
    - Random allele creation (new_allele)
    - Validity checks (is_valid_allele)
    - Rebuilding with other alleles (with_alleles)
    - Serialization (to_dict, from_dict)
    """

    alleles: ISeq

    numeric: ClassVar[bool] = False

    @abstractmethod
    def new_allele(self, rng: np.random.Generator) -> Any:
        """Return a random allele valid for this chromosome."""
        pass

    @abstractmethod
    def is_valid_allele(self, allele: Any) -> bool:
        pass

    @abstractmethod
    def with_alleles(self, alleles: ISeq) -> "Chromosome":
        """Same chromosome type and bounds, different alleles."""
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Chromosome":
        pass

    def __len__(self) -> int:
        return len(self.alleles)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.alleles)

    def __getitem__(self, index: int) -> Any:
        return self.alleles[index]

    def is_valid(self) -> bool:
        return self.alleles.for_all(self.is_valid_allele)

    def new_instance(self, random: Optional[np.random.Generator] = None) -> "Chromosome":
        """Random chromosome with the same type, bounds and length."""
        rng = random_registry.resolve(random)
        return self.with_alleles(
            ISeq.generate(lambda: self.new_allele(rng), len(self))
        )


@register_chromosome
@dataclass(frozen=True)
class BitChromosome(Chromosome):
    """
    Chromosome of boolean alleles.

    ``probability`` is the chance of a set bit when drawing new alleles.
    """

    alleles: ISeq
    probability: float = 0.5

    def __post_init__(self):
        require_probability(self.probability)

    @classmethod
    def of(
        cls,
        length: int,
        probability: float = 0.5,
        random: Optional[np.random.Generator] = None,
    ) -> "BitChromosome":
        if length < 1:
            raise ValueError(f"Chromosome length must be positive: {length}")
        rng = random_registry.resolve(random)
        bits = rng.random(length) < probability
        return cls(ISeq.from_iterable(bool(b) for b in bits), probability)

    @classmethod
    def of_bits(cls, bits: str) -> "BitChromosome":
        """Chromosome from a '0'/'1' string, first character is allele 0."""
        if not bits or set(bits) - {"0", "1"}:
            raise ValueError(f"Invalid bit string: {bits!r}")
        return cls(ISeq.from_iterable(c == "1" for c in bits))

    def new_allele(self, rng: np.random.Generator) -> bool:
        return bool(rng.random() < self.probability)

    def is_valid_allele(self, allele: Any) -> bool:
        return isinstance(allele, (bool, np.bool_))

    def with_alleles(self, alleles: ISeq) -> "BitChromosome":
        return BitChromosome(alleles, self.probability)

    def bit_count(self) -> int:
        return sum(1 for bit in self.alleles if bit)

    def to_bit_string(self) -> str:
        return "".join("1" if bit else "0" for bit in self.alleles)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "BitChromosome",
            "bits": self.to_bit_string(),
            "probability": self.probability,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BitChromosome":
        return cls(
            ISeq.from_iterable(c == "1" for c in data["bits"]),
            data.get("probability", 0.5),
        )


@dataclass(frozen=True)
class _BoundedChromosome(Chromosome):
    """Numeric alleles in the closed range ``[min, max]``."""

    alleles: ISeq
    min: float = 0.0
    max: float = 1.0

    numeric: ClassVar[bool] = True

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"Invalid bounds: min={self.min} > max={self.max}")

    def is_valid_allele(self, allele: Any) -> bool:
        return self.min <= allele <= self.max

    def clip(self, value: float) -> Any:
        return float(np.clip(value, self.min, self.max))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": type(self).__name__,
            "alleles": self.alleles.to_list(),
            "min": self.min,
            "max": self.max,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "_BoundedChromosome":
        return cls(
            ISeq.from_iterable(data["alleles"]),
            data.get("min", 0.0),
            data.get("max", 1.0),
        )


@register_chromosome
@dataclass(frozen=True)
class DoubleChromosome(_BoundedChromosome):
    """Chromosome of floats drawn uniformly from ``[min, max)``."""

    @classmethod
    def of(
        cls,
        min: float,
        max: float,
        length: int = 1,
        random: Optional[np.random.Generator] = None,
    ) -> "DoubleChromosome":
        if length < 1:
            raise ValueError(f"Chromosome length must be positive: {length}")
        prototype = cls(ISeq.of(float(min)), float(min), float(max))
        rng = random_registry.resolve(random)
        return prototype.with_alleles(
            ISeq.generate(lambda: prototype.new_allele(rng), length)
        )

    def new_allele(self, rng: np.random.Generator) -> float:
        return float(rng.uniform(self.min, self.max))

    def with_alleles(self, alleles: ISeq) -> "DoubleChromosome":
        return DoubleChromosome(alleles, self.min, self.max)


@register_chromosome
@dataclass(frozen=True)
class IntegerChromosome(_BoundedChromosome):
    """Chromosome of integers drawn uniformly from ``[min, max]``."""

    min: int = 0
    max: int = 100

    @classmethod
    def of(
        cls,
        min: int,
        max: int,
        length: int = 1,
        random: Optional[np.random.Generator] = None,
    ) -> "IntegerChromosome":
        if length < 1:
            raise ValueError(f"Chromosome length must be positive: {length}")
        prototype = cls(ISeq.of(int(min)), int(min), int(max))
        rng = random_registry.resolve(random)
        return prototype.with_alleles(
            ISeq.generate(lambda: prototype.new_allele(rng), length)
        )

    def new_allele(self, rng: np.random.Generator) -> int:
        return int(rng.integers(self.min, self.max, endpoint=True))

    def clip(self, value: float) -> int:
        return int(np.clip(round(value), self.min, self.max))

    def with_alleles(self, alleles: ISeq) -> "IntegerChromosome":
        return IntegerChromosome(alleles, self.min, self.max)


def chromosome_from_dict(data: Dict[str, Any]) -> Chromosome:
    """Deserialize any registered chromosome type."""
    type_name = data.get("type")
    if type_name not in CHROMOSOME_TYPES:
        raise ValueError(f"Unknown chromosome type: {type_name}")
    return CHROMOSOME_TYPES[type_name].from_dict(data)

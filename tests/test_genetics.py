"""
Tests for evostream/genetics/

Tests chromosomes, genotypes, phenotypes and the optimization direction.
"""

import pytest
import numpy as np

from evostream.genetics import (
    BitChromosome,
    DoubleChromosome,
    Genotype,
    IntegerChromosome,
    Optimize,
    Phenotype,
    as_factory,
    chromosome_from_dict,
)
from evostream.util import ISeq


# ==================== Chromosome Tests ====================

class TestBitChromosome:
    """Tests for BitChromosome."""

    def test_of_creates_valid_chromosome(self):
        """Random chromosome has the requested length and boolean alleles."""
        rng = np.random.default_rng(42)
        chromosome = BitChromosome.of(16, 0.5, rng)

        assert len(chromosome) == 16
        assert chromosome.is_valid()

    def test_of_bits(self):
        """Bit strings map to alleles in order."""
        chromosome = BitChromosome.of_bits("10110")

        assert chromosome.bit_count() == 3
        assert chromosome.to_bit_string() == "10110"
        assert chromosome[0] is True

    def test_invalid_bits(self):
        """Only '0' and '1' are accepted."""
        with pytest.raises(ValueError):
            BitChromosome.of_bits("10a")

    def test_probability_extremes(self):
        """Probability 0 gives no set bits, 1 gives all set bits."""
        rng = np.random.default_rng(42)

        assert BitChromosome.of(10, 0.0, rng).bit_count() == 0
        assert BitChromosome.of(10, 1.0, rng).bit_count() == 10

    def test_serialization(self):
        """Chromosome serializes and deserializes correctly."""
        chromosome = BitChromosome.of_bits("0110")
        restored = chromosome_from_dict(chromosome.to_dict())

        assert restored == chromosome


class TestNumericChromosomes:
    """Tests for DoubleChromosome and IntegerChromosome."""

    def test_double_within_bounds(self):
        """Alleles lie within [min, max]."""
        rng = np.random.default_rng(42)
        chromosome = DoubleChromosome.of(-1.0, 1.0, 50, rng)

        assert chromosome.is_valid()
        assert all(-1.0 <= a <= 1.0 for a in chromosome)

    def test_integer_within_bounds(self):
        """Integer alleles include both bounds."""
        rng = np.random.default_rng(42)
        chromosome = IntegerChromosome.of(0, 3, 200, rng)

        assert set(chromosome) == {0, 1, 2, 3}

    def test_clip(self):
        """clip keeps values inside the bounds."""
        double = DoubleChromosome.of(0.0, 1.0)
        integer = IntegerChromosome.of(0, 10)

        assert double.clip(1.5) == 1.0
        assert integer.clip(-3.2) == 0
        assert integer.clip(4.6) == 5

    def test_invalid_bounds(self):
        """min must not exceed max."""
        with pytest.raises(ValueError):
            DoubleChromosome(ISeq.of(0.5), 1.0, 0.0)

    def test_new_instance_keeps_shape(self):
        """new_instance keeps type, bounds and length."""
        rng = np.random.default_rng(42)
        chromosome = IntegerChromosome.of(5, 9, 4, rng)
        fresh = chromosome.new_instance(rng)

        assert isinstance(fresh, IntegerChromosome)
        assert len(fresh) == 4
        assert (fresh.min, fresh.max) == (5, 9)


# ==================== Genotype Tests ====================

class TestGenotype:
    """Tests for Genotype."""

    def test_requires_chromosome(self):
        """Empty genotypes are rejected."""
        with pytest.raises(ValueError):
            Genotype(ISeq.empty())

    def test_gene_count(self):
        """gene_count sums all chromosome lengths."""
        genotype = Genotype.of(BitChromosome.of_bits("101"), DoubleChromosome.of(0, 1, 4))

        assert len(genotype) == 2
        assert genotype.gene_count == 7

    def test_with_chromosome(self):
        """with_chromosome replaces one chromosome, leaving the original."""
        genotype = Genotype.of(BitChromosome.of_bits("000"))
        changed = genotype.with_chromosome(0, BitChromosome.of_bits("111"))

        assert genotype.chromosome().bit_count() == 0
        assert changed.chromosome().bit_count() == 3

    def test_hashable(self):
        """Equal genotypes are equal and hash equal."""
        a = Genotype.of(BitChromosome.of_bits("1010"))
        b = Genotype.of(BitChromosome.of_bits("1010"))

        assert a == b
        assert hash(a) == hash(b)

    def test_serialization(self):
        """Genotype round trip through a dict."""
        rng = np.random.default_rng(42)
        genotype = Genotype.of(DoubleChromosome.of(0, 1, 3, rng), BitChromosome.of(5, 0.5, rng))

        assert Genotype.from_dict(genotype.to_dict()) == genotype

    def test_as_factory(self):
        """A prototype becomes a factory of same-shaped genotypes."""
        rng = np.random.default_rng(42)
        factory = as_factory(Genotype.of(BitChromosome.of(8)))
        genotype = factory(rng)

        assert genotype.gene_count == 8
        with pytest.raises(TypeError):
            as_factory(None)


# ==================== Phenotype Tests ====================

class TestPhenotype:
    """Tests for Phenotype."""

    def test_evaluate_once(self):
        """Fitness is computed once and cached."""
        calls = []

        def fitness(genotype):
            calls.append(genotype)
            return genotype.chromosome().bit_count()

        phenotype = Phenotype.of(Genotype.of(BitChromosome.of_bits("1101")), 1)
        evaluated = phenotype.evaluate(fitness)

        assert not phenotype.is_evaluated()
        assert evaluated.fitness == 3
        assert evaluated.evaluate(fitness) is evaluated
        assert len(calls) == 1

    def test_age(self):
        """Age is the distance to the birth generation."""
        phenotype = Phenotype(Genotype.of(BitChromosome.of_bits("1")), 3)

        assert phenotype.age(10) == 7

    def test_negative_generation(self):
        """Birth generation must not be negative."""
        with pytest.raises(ValueError):
            Phenotype(Genotype.of(BitChromosome.of_bits("1")), -1)


# ==================== Optimize Tests ====================

class TestOptimize:
    """Tests for Optimize."""

    def test_compare(self):
        """Larger is better when maximizing, smaller when minimizing."""
        assert Optimize.MAXIMUM.compare(2, 1) > 0
        assert Optimize.MINIMUM.compare(2, 1) < 0
        assert Optimize.MAXIMUM.compare(1, 1) == 0

    def test_best_and_worst(self):
        """best/worst pick according to the direction."""
        assert Optimize.MAXIMUM.best(3, 5) == 5
        assert Optimize.MINIMUM.best(3, 5) == 3
        assert Optimize.MINIMUM.worst(3, 5) == 5
        assert Optimize.MAXIMUM.best_of([4, 9, 2]) == 9

    def test_parse(self):
        """Direction names parse case-insensitively."""
        assert Optimize.parse("Minimum") is Optimize.MINIMUM
        assert Optimize.parse(Optimize.MAXIMUM) is Optimize.MAXIMUM
        with pytest.raises(ValueError):
            Optimize.parse("sideways")

"""
Tests for evostream/stat/statistics.py
"""

import numpy as np

from evostream.config import EngineConfig
from evostream.engine import Engine, by_fixed_generation
from evostream.genetics import BitChromosome, Genotype
from evostream.stat import EvolutionStatistics


def run(generations, seed=42):
    engine = Engine(
        fitness_function=lambda genotype: genotype.chromosome().bit_count(),
        genotype_factory=Genotype.of(BitChromosome.of(10)),
        config=EngineConfig(population_size=20),
    )
    stream = engine.stream(random=np.random.default_rng(seed))
    return list(stream.limit(by_fixed_generation(generations)))


class TestEvolutionStatistics:
    """Tests for EvolutionStatistics."""

    def test_collect(self):
        """Statistics cover every generation and individual."""
        results = run(10)
        statistics = EvolutionStatistics.collect(results)

        assert statistics.generations == 10
        assert statistics.fitness.count == 10 * 20
        assert statistics.phenotype_age.count == 10 * 20
        assert statistics.altered.sum == sum(r.alter_count for r in results)
        assert 0 <= statistics.fitness_range.min <= statistics.fitness_range.max <= 10

    def test_peek_passes_results_through(self):
        """peek yields the results unchanged while accumulating them."""
        results = run(5)
        statistics = EvolutionStatistics()

        passed = list(statistics.peek(results))

        assert passed == results
        assert statistics.generations == 5

    def test_combine(self):
        """Combining partial statistics equals collecting all results."""
        results = run(8)
        whole = EvolutionStatistics.collect(results)
        combined = EvolutionStatistics.collect(results[:3]).combine(
            EvolutionStatistics.collect(results[3:])
        )

        assert combined.fitness.same_state(whole.fitness)
        assert combined.killed.same_state(whole.killed)
        assert combined.fitness_range.same_state(whole.fitness_range)
        assert combined.generations == whole.generations

    def test_str(self):
        """The summary names the sections."""
        text = str(EvolutionStatistics.collect(run(3)))

        assert "Generations: 3" in text
        assert "Fitness" in text
        assert "Altered" in text

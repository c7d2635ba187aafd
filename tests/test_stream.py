"""
Tests for evostream/engine/stream.py and evostream/engine/limits.py

The stream is driven by a scripted step function: the best fitness of
generation n is ``script[n - 1]``, so limits can be tested exactly.
"""

import math
from itertools import islice

import pytest

from evostream.engine import (
    EvolutionResult,
    EvolutionStart,
    EvolutionStream,
    best_phenotype,
    best_result,
    by_execution_time,
    by_fitness_threshold,
    by_fixed_generation,
    by_population_convergence,
    by_steady_fitness,
)
from evostream.genetics import BitChromosome, Genotype, Optimize, Phenotype
from evostream.util import ISeq


def phenotype(fitness, generation=1):
    return Phenotype(Genotype.of(BitChromosome.of_bits("1")), generation, fitness)


class ScriptedEvolution:
    """Step function whose best fitness follows a script; counts calls."""

    def __init__(self, script=None, optimize=Optimize.MAXIMUM):
        self.script = script
        self.optimize = optimize
        self.calls = 0

    def __call__(self, start):
        self.calls += 1
        generation = start.generation
        if self.script is None:
            fitness = float(generation)
        else:
            fitness = self.script[min(generation, len(self.script)) - 1]
        best = phenotype(fitness, generation)
        return EvolutionResult(
            optimize=self.optimize,
            population=ISeq.of(best, phenotype(0.0, generation)),
            generation=generation,
            best_phenotype=best,
        )


def start_supplier():
    return EvolutionStart(ISeq.of(phenotype(0.0)), 1)


class FakeClock:
    """Clock advancing by a fixed step on every reading."""

    def __init__(self, step):
        self.step = step
        self.now = 0.0

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


# ==================== Stream Tests ====================

class TestEvolutionStream:
    """Tests for EvolutionStream."""

    def test_generation_numbers(self):
        """The n-th result belongs to generation n."""
        stream = EvolutionStream(start_supplier, ScriptedEvolution())

        generations = [r.generation for r in islice(stream, 10)]

        assert generations == list(range(1, 11))

    def test_lazy_and_no_reexecution(self):
        """Each pulled result runs the step function exactly once."""
        evolution = ScriptedEvolution()
        stream = EvolutionStream(start_supplier, evolution)

        iterator = iter(stream)
        assert evolution.calls == 0
        next(iterator)
        next(iterator)
        assert evolution.calls == 2

        list(islice(stream, 5))
        assert evolution.calls == 7

    def test_result_feeds_next_start(self):
        """The start of step n + 1 is next() of result n."""
        seen = []
        evolution = ScriptedEvolution()

        def recording(start):
            seen.append(start)
            return evolution(start)

        results = list(islice(EvolutionStream(start_supplier, recording), 3))

        assert seen[1].population == results[0].population
        assert seen[2].best_phenotype == results[1].best_phenotype

    def test_independent_runs(self):
        """Every iteration starts over from the start supplier."""
        stream = EvolutionStream(start_supplier, ScriptedEvolution()).limit(by_fixed_generation(3))

        first = [r.generation for r in stream]
        second = [r.generation for r in stream]

        assert first == second == [1, 2, 3]

    def test_runs_created_per_iteration(self):
        """of_runs builds a new start supplier and step function per iteration."""
        created = []

        def runs():
            evolution = ScriptedEvolution()
            created.append(evolution)
            return start_supplier, evolution

        stream = EvolutionStream.of_runs(runs).limit(by_fixed_generation(2))
        assert created == []

        list(stream)
        list(stream)

        assert len(created) == 2
        assert [e.calls for e in created] == [2, 2]

    def test_estimate_size_unknown(self):
        """The stream is unbounded and cannot be split."""
        stream = EvolutionStream(start_supplier, ScriptedEvolution())

        assert stream.estimate_size == math.inf
        assert not hasattr(stream, "try_split")

    def test_null_arguments(self):
        """Missing collaborators are rejected eagerly."""
        with pytest.raises(TypeError):
            EvolutionStream(None, ScriptedEvolution())
        with pytest.raises(TypeError):
            EvolutionStream(start_supplier, None)

    def test_step_returning_none(self):
        """A step function returning None is an error."""
        stream = EvolutionStream(start_supplier, lambda start: None)

        with pytest.raises(TypeError):
            next(iter(stream))

    def test_best_phenotype_reducer(self):
        """best_phenotype consumes the stream and returns the best one."""
        evolution = ScriptedEvolution([3.0, 9.0, 4.0, 1.0])
        stream = EvolutionStream(start_supplier, evolution).limit(by_fixed_generation(4))

        assert best_phenotype(stream).fitness == 9.0
        assert best_result(stream).generation == 2
        assert best_phenotype([]) is None


# ==================== Limit Tests ====================

class TestLimits:
    """Tests for stream limits."""

    def test_fixed_generation(self):
        """Exactly n results are produced, with n step calls."""
        evolution = ScriptedEvolution()
        results = list(EvolutionStream(start_supplier, evolution).limit(by_fixed_generation(5)))

        assert len(results) == 5
        assert evolution.calls == 5

    def test_fitness_threshold(self):
        """The first result reaching the threshold is the last one."""
        evolution = ScriptedEvolution([1.0, 2.0, 5.0, 7.0, 9.0])
        stream = EvolutionStream(start_supplier, evolution).limit(by_fitness_threshold(6.0))

        assert [r.best_fitness for r in stream] == [1.0, 2.0, 5.0, 7.0]

    def test_fitness_threshold_minimizing(self):
        """When minimizing the threshold is reached from above."""
        evolution = ScriptedEvolution([9.0, 4.0, 2.0, 1.0], Optimize.MINIMUM)
        stream = EvolutionStream(start_supplier, evolution).limit(by_fitness_threshold(3.0))

        assert [r.best_fitness for r in stream] == [9.0, 4.0, 2.0]

    def test_steady_fitness(self):
        """Stops after n results without improvement."""
        evolution = ScriptedEvolution([1.0, 2.0, 2.0, 2.0, 3.0, 3.0, 3.0, 3.0])
        stream = EvolutionStream(start_supplier, evolution).limit(by_steady_fitness(2))

        assert [r.generation for r in stream] == [1, 2, 3, 4]

    def test_execution_time(self):
        """Stops once the time budget is used up."""
        stream = EvolutionStream(start_supplier, ScriptedEvolution()).limit(
            by_execution_time(2.5, clock=FakeClock(1.0))
        )

        assert [r.generation for r in stream] == [1, 2, 3, 4]

    def test_population_convergence(self):
        """Stops when best and mean fitness are close."""
        evolution = ScriptedEvolution([10.0, 4.0, 0.5])
        stream = EvolutionStream(start_supplier, evolution).limit(by_population_convergence(1.0))

        assert [r.generation for r in stream] == [1, 2, 3]

    def test_combined_limits(self):
        """The first limit to fail ends the stream."""
        stream = (
            EvolutionStream(start_supplier, ScriptedEvolution())
            .limit(by_fixed_generation(100))
            .limit(by_fitness_threshold(3.0))
        )

        assert [r.generation for r in stream] == [1, 2, 3]

    def test_invalid_arguments(self):
        """Limit parameters are validated."""
        with pytest.raises(ValueError):
            by_fixed_generation(0)
        with pytest.raises(ValueError):
            by_steady_fitness(0)
        with pytest.raises(ValueError):
            by_population_convergence(-1.0)

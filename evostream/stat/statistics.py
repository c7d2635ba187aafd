"""
evostream/stat/statistics.py

Statistics over a run of generation results.

    statistics = EvolutionStatistics()
    best = best_phenotype(statistics.peek(stream.limit(by_fixed_generation(50))))
    print(statistics)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator

from .min_max import MinMax
from .moments import Moments

if TYPE_CHECKING:
    from evostream.engine.evolution import EvolutionResult


class EvolutionStatistics:
    """
    Accumulates per-generation counts, durations, phenotype ages and
    fitness values. Fitness must be numeric.
    """

    def __init__(self):
        self.altered = Moments()
        self.killed = Moments()
        self.invalid = Moments()
        self.phenotype_age = Moments()
        self.fitness = Moments()
        self.fitness_range: MinMax = MinMax()

        self.selection_duration = Moments()
        self.alter_duration = Moments()
        self.evaluation_duration = Moments()
        self.evolve_duration = Moments()

    @classmethod
    def collect(cls, results: Iterable["EvolutionResult"]) -> "EvolutionStatistics":
        statistics = cls()
        for result in results:
            statistics.accept(result)
        return statistics

    def accept(self, result: "EvolutionResult") -> None:
        self.altered.accept(result.alter_count)
        self.killed.accept(result.kill_count)
        self.invalid.accept(result.invalid_count)

        durations = result.durations
        self.selection_duration.accept(
            durations.offspring_selection + durations.survivors_selection
        )
        self.alter_duration.accept(durations.offspring_alter)
        self.evaluation_duration.accept(durations.evaluation)
        self.evolve_duration.accept(durations.evolve)

        fitness = [float(p.fitness) for p in result.population]
        self.fitness.accept_all(fitness)
        for value in fitness:
            self.fitness_range.accept(value)
        self.phenotype_age.accept_all(
            [p.age(result.generation) for p in result.population]
        )

    def __call__(self, result: "EvolutionResult") -> None:
        self.accept(result)

    def peek(self, results: Iterable["EvolutionResult"]) -> Iterator["EvolutionResult"]:
        """Pass results through unchanged while accumulating them."""
        for result in results:
            self.accept(result)
            yield result

    def combine(self, other: "EvolutionStatistics") -> "EvolutionStatistics":
        self.altered.combine(other.altered)
        self.killed.combine(other.killed)
        self.invalid.combine(other.invalid)
        self.phenotype_age.combine(other.phenotype_age)
        self.fitness.combine(other.fitness)
        self.fitness_range.combine(other.fitness_range)
        self.selection_duration.combine(other.selection_duration)
        self.alter_duration.combine(other.alter_duration)
        self.evaluation_duration.combine(other.evaluation_duration)
        self.evolve_duration.combine(other.evolve_duration)
        return self

    @property
    def generations(self) -> int:
        return self.evolve_duration.count

    def __str__(self) -> str:
        def row(name: str, m: Moments) -> str:
            return f"|  {name:<22} mean={m.mean:<12.6g} sd={m.std:<12.6g} min={m.min} max={m.max}"

        lines = [
            "+---------------------------------------------------------------------------+",
            f"|  Generations: {self.generations}",
            "+-- Time (seconds) ----------------------------------------------------------+",
            row("Selection", self.selection_duration),
            row("Altering", self.alter_duration),
            row("Fitness calculation", self.evaluation_duration),
            row("Overall execution", self.evolve_duration),
            "+-- Population --------------------------------------------------------------+",
            row("Age", self.phenotype_age),
            row("Altered", self.altered),
            row("Killed", self.killed),
            row("Invalids", self.invalid),
            "+-- Fitness -----------------------------------------------------------------+",
            row("Fitness", self.fitness),
            f"|  {'Range':<22} min={self.fitness_range.min} max={self.fitness_range.max}",
            "+---------------------------------------------------------------------------+",
        ]
        return "\n".join(lines)

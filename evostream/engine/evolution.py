"""
evostream/engine/evolution.py

The values passed between generation steps.

    EvolutionStart --(Engine.evolve)--> EvolutionResult --(next)--> EvolutionStart

Both are immutable. ``EvolutionResult.next()`` is a pure projection: it
builds the start of the following generation from the result, nothing is
modified.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from evostream.genetics import Optimize, Phenotype
from evostream.util import ISeq


@dataclass(frozen=True)
class EvolutionStart:
    """
    Input of one generation step.

    ``best_phenotype`` carries the best individual found so far into the
    next step; it is None for the very first generation.
    """

    population: ISeq
    generation: int
    best_phenotype: Optional[Phenotype] = None

    def __post_init__(self):
        if self.population is None:
            raise TypeError("population must not be None")
        if self.generation < 1:
            raise ValueError(f"Generation must be positive: {self.generation}")


@dataclass(frozen=True)
class EvolutionDurations:
    """Wall-clock seconds spent in the phases of one generation step."""

    offspring_selection: float = 0.0
    survivors_selection: float = 0.0
    offspring_alter: float = 0.0
    evaluation: float = 0.0
    evolve: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "offspring_selection": self.offspring_selection,
            "survivors_selection": self.survivors_selection,
            "offspring_alter": self.offspring_alter,
            "evaluation": self.evaluation,
            "evolve": self.evolve,
        }


@dataclass(frozen=True)
class EvolutionResult:
    """
    Output of one generation step.

    Contains the new population, the generation it belongs to, what
    happened while producing it (alterations, killed and invalid
    individuals, durations) and the best phenotype found so far.
    """

    optimize: Optimize
    population: ISeq
    generation: int
    best_phenotype: Phenotype
    alter_count: int = 0
    kill_count: int = 0
    invalid_count: int = 0
    durations: EvolutionDurations = field(default_factory=EvolutionDurations)

    def __post_init__(self):
        if self.best_phenotype is None:
            raise TypeError("best_phenotype must not be None")
        for name in ("alter_count", "kill_count", "invalid_count"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    def next(self) -> EvolutionStart:
        """Start of the next generation."""
        return EvolutionStart(self.population, self.generation + 1, self.best_phenotype)

    @property
    def best_fitness(self) -> Any:
        return self.best_phenotype.fitness

    @property
    def worst_phenotype(self) -> Phenotype:
        worst = None
        for phenotype in self.population:
            if worst is None or self.optimize.compare(phenotype.fitness, worst.fitness) < 0:
                worst = phenotype
        return worst

    @property
    def worst_fitness(self) -> Any:
        return self.worst_phenotype.fitness

    def population_best(self) -> Phenotype:
        """Best phenotype of this generation's population only."""
        best = None
        for phenotype in self.population:
            if best is None or self.optimize.compare(phenotype.fitness, best.fitness) > 0:
                best = phenotype
        return best

    def to_dict(self) -> Dict[str, Any]:
        """Summary of this generation (population not included)."""
        return {
            "generation": self.generation,
            "optimize": self.optimize.value,
            "best_fitness": self.best_fitness,
            "worst_fitness": self.worst_fitness,
            "population_size": len(self.population),
            "alter_count": self.alter_count,
            "kill_count": self.kill_count,
            "invalid_count": self.invalid_count,
            "durations": self.durations.to_dict(),
        }


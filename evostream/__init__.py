"""
evostream: Evolution as a Stream

A genetic-algorithm engine that exposes evolution as a lazy, unbounded
sequence of generation results.

- Select, alter, evaluate, replace (one generation step)
- Pull as many generations as you like (the stream)
- Observe convergence with combinable online statistics
"""

__version__ = "0.1.0"

from evostream.config import EngineConfig, load_config
from evostream.engine import (
    Engine,
    EvolutionResult,
    EvolutionStart,
    EvolutionStream,
    best_phenotype,
)
from evostream.genetics import Genotype, Optimize, Phenotype

__all__ = [
    "EngineConfig",
    "load_config",
    "Engine",
    "EvolutionResult",
    "EvolutionStart",
    "EvolutionStream",
    "best_phenotype",
    "Genotype",
    "Optimize",
    "Phenotype",
]

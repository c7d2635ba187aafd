"""
Example: Ones Counting

Run: python -m evostream.examples.ones_counting --length 20 --generations 100

Evolve bit strings toward all ones. Fitness is the number of set bits.
"""

import argparse
import logging
from typing import Optional

from evostream.alteration import Mutator, SinglePointCrossover
from evostream.config import EngineConfig, load_config
from evostream.engine import Engine, best_phenotype, by_fitness_threshold, by_fixed_generation
from evostream.genetics import BitChromosome, Genotype
from evostream.selection import RouletteWheelSelector, TournamentSelector
from evostream.stat import EvolutionStatistics
from evostream.util import random_registry

logger = logging.getLogger(__name__)


def count_ones(genotype: Genotype) -> int:
    return genotype.chromosome().bit_count()


def run_example(
    length: int = 20,
    generations: int = 100,
    config: Optional[EngineConfig] = None,
    seed: Optional[int] = None,
    verbose: bool = True,
):
    """Evolve until all bits are set or the generation budget is used up."""
    config = config or EngineConfig(population_size=500)
    engine = Engine(
        fitness_function=count_ones,
        genotype_factory=Genotype.of(BitChromosome.of(length, 0.15)),
        config=config,
        offspring_selector=RouletteWheelSelector(),
        survivors_selector=TournamentSelector(5),
        alterer=Mutator(0.55).and_then(SinglePointCrossover(0.06)),
    )
    statistics = EvolutionStatistics()

    with engine, random_registry.using(seed):
        stream = (
            engine.stream()
            .limit(by_fixed_generation(generations))
            .limit(by_fitness_threshold(length))
        )
        best = best_phenotype(statistics.peek(stream))

    if verbose:
        print("=" * 50)
        print(f"Ones Counting (length={length}, population={config.population_size})")
        print("=" * 50)
        print(statistics)
        print(f"\nBest: {best.genotype.chromosome().to_bit_string()} "
              f"fitness={best.fitness} (generation {best.generation})")

    return best, statistics


def main():
    parser = argparse.ArgumentParser(description="Ones Counting Example")
    parser.add_argument("--length", type=int, default=20)
    parser.add_argument("--generations", type=int, default=100)
    parser.add_argument("--population", type=int, default=500)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file with engine settings")
    parser.add_argument("--log-level", type=str, default="INFO")
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if args.config:
        config = load_config(args.config)
    else:
        config = EngineConfig(population_size=args.population)

    run_example(
        length=args.length,
        generations=args.generations,
        config=config,
        seed=args.seed,
    )


if __name__ == "__main__":
    main()

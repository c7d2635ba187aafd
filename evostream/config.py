"""
evostream/config.py

Engine configuration: population shape, replacement policy, optimization
direction and parallelism. Loadable from a YAML file.

    # engine.yaml
    population_size: 100
    offspring_fraction: 0.6
    max_phenotype_age: 70
    optimize: minimum
    max_workers: 4
    seed: 42
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from evostream.genetics import Optimize

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Configuration for an evolution Engine"""

    # Population
    population_size: int = 50
    offspring_fraction: float = 0.6

    # Replacement
    max_phenotype_age: int = 70
    individual_creation_retries: int = 10

    # Direction: "maximum" or "minimum"
    optimize: str = "maximum"

    # Evaluation threads; 1 evaluates in the calling thread
    max_workers: int = 1

    # Seed for streams created without an explicit generator
    seed: Optional[int] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        if self.population_size < 1:
            raise ValueError(f"population_size must be positive: {self.population_size}")
        if not 0.0 <= self.offspring_fraction <= 1.0:
            raise ValueError(
                f"offspring_fraction must be in [0, 1]: {self.offspring_fraction}"
            )
        if self.max_phenotype_age < 1:
            raise ValueError(f"max_phenotype_age must be positive: {self.max_phenotype_age}")
        if self.individual_creation_retries < 0:
            raise ValueError(
                f"individual_creation_retries must not be negative: "
                f"{self.individual_creation_retries}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be positive: {self.max_workers}")
        # Raises on an unknown direction
        self.optimize = Optimize.parse(self.optimize).value

    @property
    def optimize_direction(self) -> Optimize:
        return Optimize.parse(self.optimize)

    @property
    def offspring_count(self) -> int:
        return int(round(self.population_size * self.offspring_fraction))

    @property
    def survivors_count(self) -> int:
        return self.population_size - self.offspring_count

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "EngineConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown engine config keys: {unknown}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, path: Union[str, Path], section: Optional[str] = None) -> "EngineConfig":
        return load_config(path, section)


def load_config(path: Union[str, Path], section: Optional[str] = None) -> EngineConfig:
    """
    Load an EngineConfig from a YAML file.

    Args:
        path: YAML file to read
        section: Optional top-level key holding the engine settings

    Returns:
        EngineConfig; an empty file gives the defaults
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {path}, got {type(data).__name__}")
    if section is not None:
        data = data.get(section, {}) or {}

    config = EngineConfig.from_dict(data)
    logger.info(f"Loaded engine config from {path}")
    return config

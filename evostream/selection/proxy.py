"""
evostream/selection/proxy.py

Probability-gated selector dispatch.

Optimizers that search over engine set-ups need to pick a selector variant
from a random draw. Instead of instantiating classes by name, the variants
are a fixed enumeration and dispatch is a table lookup:

- SelectorProxy: yields its selector when ``draw < probability``, else None
- SelectorTable: variants own consecutive probability ranges; a draw falls
  into at most one range
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from evostream.util import random_registry, require_probability

from .selector import (
    RouletteWheelSelector,
    Selector,
    StochasticUniversalSelector,
    TournamentSelector,
    TruncationSelector,
)


class SelectorKind(Enum):
    """The selector variants available for dispatch."""

    TOURNAMENT = "tournament"
    TRUNCATION = "truncation"
    ROULETTE_WHEEL = "roulette_wheel"
    STOCHASTIC_UNIVERSAL = "stochastic_universal"

    def create(self, **params: Any) -> Selector:
        if self is SelectorKind.TOURNAMENT:
            return TournamentSelector(**params)
        if self is SelectorKind.TRUNCATION:
            return TruncationSelector(**params)
        if self is SelectorKind.ROULETTE_WHEEL:
            return RouletteWheelSelector(**params)
        return StochasticUniversalSelector(**params)


@dataclass(frozen=True)
class SelectorProxy:
    """A selector variant guarded by a probability threshold."""

    kind: SelectorKind
    probability: float
    params: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        require_probability(self.probability)

    def factory(self, draw: float) -> Optional[Selector]:
        """The selector if draw is below the threshold, otherwise None."""
        if draw < self.probability:
            return self.kind.create(**self.params)
        return None


class SelectorTable:
    """
    Maps probability ranges to selector variants.

        table = SelectorTable([
            (SelectorKind.TOURNAMENT, 0.5),
            (SelectorKind.STOCHASTIC_UNIVERSAL, 0.3),
        ])
        table.choose(0.1)   # TournamentSelector
        table.choose(0.6)   # StochasticUniversalSelector
        table.choose(0.9)   # None: no variant owns [0.8, 1)

    Weights must be non-negative and sum to at most one.
    """

    def __init__(
        self,
        entries: Sequence[Tuple[SelectorKind, float]],
        params: Optional[Dict[SelectorKind, Dict[str, Any]]] = None,
    ):
        if not entries:
            raise ValueError("Selector table needs at least one entry")

        self._ranges: List[Tuple[float, float, SelectorProxy]] = []
        lower = 0.0
        for kind, weight in entries:
            if weight < 0:
                raise ValueError(f"Negative weight for {kind.value}: {weight}")
            upper = lower + weight
            proxy = SelectorProxy(kind, min(upper, 1.0), (params or {}).get(kind, {}))
            self._ranges.append((lower, upper, proxy))
            lower = upper

        if lower > 1.0 + 1e-9:
            raise ValueError(f"Selector weights sum to {lower}, must be at most 1")

    @property
    def total(self) -> float:
        return self._ranges[-1][1]

    def kinds(self) -> List[SelectorKind]:
        return [proxy.kind for _, _, proxy in self._ranges]

    def choose(self, draw: float) -> Optional[Selector]:
        """Selector whose range ``[lower, upper)`` contains draw, or None."""
        for lower, _, proxy in self._ranges:
            if draw >= lower:
                selector = proxy.factory(draw)
                if selector is not None:
                    return selector
        return None

    def draw(self, random: Optional[np.random.Generator] = None) -> Optional[Selector]:
        return self.choose(float(random_registry.resolve(random).random()))

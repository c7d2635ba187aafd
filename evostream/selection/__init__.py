"""
evostream/selection/

Who gets to reproduce, and who survives.
"""

from .selector import (
    Selector,
    ProbabilitySelector,
    RouletteWheelSelector,
    StochasticUniversalSelector,
    TournamentSelector,
    TruncationSelector,
    sort_best_first,
)
from .proxy import SelectorKind, SelectorProxy, SelectorTable

__all__ = [
    "Selector",
    "ProbabilitySelector",
    "RouletteWheelSelector",
    "StochasticUniversalSelector",
    "TournamentSelector",
    "TruncationSelector",
    "sort_best_first",
    "SelectorKind",
    "SelectorProxy",
    "SelectorTable",
]

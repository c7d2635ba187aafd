"""
evostream/stat/

Mergeable accumulators (MinMax, Moments), stream flat mappers and run
statistics.
"""

from .min_max import (
    MinMax,
    max_of,
    min_of,
    to_slice_max,
    to_slice_min,
    to_strictly_decreasing,
    to_strictly_increasing,
)
from .moments import Moments
from .statistics import EvolutionStatistics

__all__ = [
    "MinMax",
    "min_of",
    "max_of",
    "to_strictly_increasing",
    "to_strictly_decreasing",
    "to_slice_max",
    "to_slice_min",
    "Moments",
    "EvolutionStatistics",
]

"""
evostream/genetics/optimize.py

Direction of optimization: is a larger fitness better, or a smaller one?
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")


def natural_compare(a: Any, b: Any) -> int:
    """Three-way comparison by natural ordering."""
    return (a > b) - (a < b)


class Optimize(Enum):
    """Whether the engine maximizes or minimizes fitness."""

    MAXIMUM = "maximum"
    MINIMUM = "minimum"

    def compare(self, a: Any, b: Any) -> int:
        """Positive if a is better than b, negative if worse, zero if equal."""
        result = natural_compare(a, b)
        return result if self is Optimize.MAXIMUM else -result

    def best(self, a: T, b: T) -> T:
        return a if self.compare(a, b) >= 0 else b

    def worst(self, a: T, b: T) -> T:
        return b if self.compare(a, b) >= 0 else a

    def descending(self) -> Callable[[Any, Any], int]:
        """Comparator ordering the best value first."""
        return lambda a, b: self.compare(b, a)

    def ascending(self) -> Callable[[Any, Any], int]:
        """Comparator ordering the worst value first."""
        return self.compare

    def best_of(self, values: Iterable[T]) -> T:
        iterator = iter(values)
        best = next(iterator)
        for value in iterator:
            best = self.best(best, value)
        return best

    @classmethod
    def parse(cls, value: "Optimize | str") -> "Optimize":
        if isinstance(value, Optimize):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Unknown optimization direction: {value!r} "
                f"(expected 'maximum' or 'minimum')"
            ) from None

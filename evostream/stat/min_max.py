"""
evostream/stat/min_max.py

Online minimum/maximum with a mergeable state.

MinMax observes values one at a time and can be combined with another
MinMax that observed a different part of the data, in any order and any
grouping. This makes it usable as the reducer of a map/reduce pass over
partitions, e.g. over fitness values evaluated in parallel.

A missing value is ``None``: a present value always beats ``None``, and
combining two ``None`` gives ``None``.

The module also provides flat mappers for streams of values:
- to_strictly_increasing / to_strictly_decreasing: skip out-of-order values
- to_slice_max / to_slice_min: best value of each block of n values
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from evostream.genetics.optimize import natural_compare

T = TypeVar("T")

Comparator = Callable[[Any, Any], int]


def min_of(comparator: Comparator, a: Optional[T], b: Optional[T]) -> Optional[T]:
    """Smaller of a and b; None only if both are None."""
    if a is None:
        return b
    if b is None:
        return a
    return a if comparator(a, b) <= 0 else b


def max_of(comparator: Comparator, a: Optional[T], b: Optional[T]) -> Optional[T]:
    """Larger of a and b; None only if both are None."""
    if a is None:
        return b
    if b is None:
        return a
    return a if comparator(a, b) >= 0 else b


class MinMax(Generic[T]):
    """
    Running minimum and maximum.

    Not thread-safe: accumulate per partition, then ``combine``.
    """

    def __init__(self, comparator: Optional[Comparator] = None):
        self._comparator = comparator or natural_compare
        self._min: Optional[T] = None
        self._max: Optional[T] = None
        self._count = 0

    @classmethod
    def of(cls, comparator: Optional[Comparator] = None) -> "MinMax[T]":
        return cls(comparator)

    @classmethod
    def collect(
        cls,
        values: Iterable[T],
        comparator: Optional[Comparator] = None,
    ) -> "MinMax[T]":
        min_max = cls(comparator)
        for value in values:
            min_max.accept(value)
        return min_max

    def accept(self, value: T) -> None:
        self._min = min_of(self._comparator, self._min, value)
        self._max = max_of(self._comparator, self._max, value)
        self._count += 1

    observe = accept

    def __call__(self, value: T) -> None:
        self.accept(value)

    def combine(self, other: "MinMax[T]") -> "MinMax[T]":
        """Merge other into this accumulator and return this one."""
        self._min = min_of(self._comparator, self._min, other._min)
        self._max = max_of(self._comparator, self._max, other._max)
        self._count += other._count
        return self

    @property
    def min(self) -> Optional[T]:
        return self._min

    @property
    def max(self) -> Optional[T]:
        return self._max

    @property
    def count(self) -> int:
        return self._count

    def same_state(self, other: "MinMax[T]") -> bool:
        """
        Equal current min and max. The number of observed values is not
        compared: two accumulators in the same state stay in the same state
        after accepting the same value.
        """
        return self is other or (self._min == other._min and self._max == other._max)

    def __repr__(self) -> str:
        return f"MinMax[count={self._count}, min={self._min}, max={self._max}]"


def _to_strictly(best: Callable[[Any, Any], Any]) -> Callable[[T], List[T]]:
    best_so_far = None

    def apply(value: T) -> List[T]:
        nonlocal best_so_far
        previous = best_so_far
        best_so_far = best(previous, value)
        if previous is not None and natural_compare(best_so_far, previous) == 0:
            return []
        return [best_so_far]

    return apply


def to_strictly_increasing() -> Callable[[T], List[T]]:
    """
    Flat mapper emitting a value only if it is larger than every value
    seen before. Values are not reordered, out-of-order values are skipped.

        f = to_strictly_increasing()
        list(chain.from_iterable(map(f, [5, 3, 7, 2, 8, 8, 9])))
        # [5, 7, 8, 9]
    """
    return _to_strictly(lambda a, b: max_of(natural_compare, a, b))


def to_strictly_decreasing() -> Callable[[T], List[T]]:
    """Flat mapper emitting a value only if it is smaller than all before."""
    return _to_strictly(lambda a, b: min_of(natural_compare, a, b))


def _to_slice_best(
    best: Callable[[Any, Any], Any],
    size: int,
) -> Callable[[T], List[T]]:
    if size < 1:
        raise ValueError(f"Range size must be at least one: {size}")

    count = 0
    current = None

    def apply(value: T) -> List[T]:
        nonlocal count, current
        count += 1
        current = best(current, value)
        if count >= size:
            result = [current]
            count = 0
            current = None
            return result
        return []

    return apply


def to_slice_max(size: int) -> Callable[[T], List[T]]:
    """Flat mapper emitting the maximum of every ``size`` values."""
    return _to_slice_best(lambda a, b: max_of(natural_compare, a, b), size)


def to_slice_min(size: int) -> Callable[[T], List[T]]:
    """Flat mapper emitting the minimum of every ``size`` values."""
    return _to_slice_best(lambda a, b: min_of(natural_compare, a, b), size)

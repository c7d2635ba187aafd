"""
evostream/util/index_sorter.py

Sort positions instead of elements.

An index sorter returns the permutation ``p`` that would sort a collection,
``sorted[i] == source[p[i]]``, and leaves the collection itself untouched.
Selectors use it to rank a population without reordering it.

The ordering is given by an index comparator ``comp(array, i, j)`` that
returns a negative number, zero or a positive number, like a three-way
comparison of ``array[i]`` and ``array[j]``.
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Sequence, TypeVar

import numpy as np

T = TypeVar("T")

IndexComparator = Callable[[Any, int, int], int]


def _sign(value: float) -> int:
    return (value > 0) - (value < 0)


def INT(array: Any, i: int, j: int) -> int:
    """Index comparator for integer arrays."""
    return _sign(int(array[i]) - int(array[j]))


def DOUBLE(array: Any, i: int, j: int) -> int:
    """Index comparator for float arrays."""
    a, b = array[i], array[j]
    return (a > b) - (a < b)


def reversed_comp(comp: IndexComparator) -> IndexComparator:
    """Comparator imposing the reverse ordering of comp."""
    return lambda array, i, j: comp(array, j, i)


def sort(array: T, length: int, comp: IndexComparator) -> np.ndarray:
    """
    Permutation of ``range(length)`` ordering array ascending by comp.

    Args:
        array: Any indexable collection, never modified
        length: Number of elements to sort
        comp: Index comparator ``comp(array, i, j)``

    Returns:
        Integer array ``p`` with ``comp(array, p[i], p[i + 1]) <= 0``
    """
    if length < 0:
        raise ValueError(f"Length must not be negative: {length}")
    if length < 2:
        return np.arange(length, dtype=int)

    key = cmp_to_key(lambda i, j: comp(array, i, j))
    return np.fromiter(sorted(range(length), key=key), dtype=int, count=length)


def sort_seq(
    seq: Sequence[T],
    comparator: Callable[[T, T], int],
) -> np.ndarray:
    """Index sort of a sequence using an element comparator."""
    return sort(seq, len(seq), lambda s, i, j: comparator(s[i], s[j]))


def argsort(values: Any, reverse: bool = False) -> np.ndarray:
    """Numeric fast path: index sort of a number array."""
    values = np.asarray(values)
    if reverse:
        return np.argsort(-values, kind="stable")
    return np.argsort(values, kind="stable")


class IndexSorter:
    """
    Reusable index sorter, bound to a length function and a comparator.

        sorter = IndexSorter.of(len, DOUBLE)
        order = sorter.sort(fitness_values)
    """

    def __init__(self, length: Callable[[Any], int], comp: IndexComparator):
        if length is None or comp is None:
            raise TypeError("length and comparator must not be None")
        self._length = length
        self._comp = comp

    @classmethod
    def of(cls, length: Callable[[Any], int], comp: IndexComparator) -> "IndexSorter":
        return cls(length, comp)

    def sort(self, array: Any) -> np.ndarray:
        return sort(array, self._length(array), self._comp)

    def reversed(self) -> "IndexSorter":
        return IndexSorter(self._length, reversed_comp(self._comp))

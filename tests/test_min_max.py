"""
Tests for evostream/stat/min_max.py
"""

from itertools import chain

import pytest
import numpy as np

from evostream.stat import (
    MinMax,
    max_of,
    min_of,
    to_slice_max,
    to_slice_min,
    to_strictly_decreasing,
    to_strictly_increasing,
)
from evostream.genetics import natural_compare


def flat_map(mapper, values):
    return list(chain.from_iterable(map(mapper, values)))


class TestMinMax:
    """Tests for MinMax."""

    def test_collect(self):
        """Minimum, maximum and count of a sequence."""
        min_max = MinMax.collect([3, 1, 4, 1, 5, 9, 2, 6])

        assert min_max.min == 1
        assert min_max.max == 9
        assert min_max.count == 8

    def test_empty(self):
        """An empty accumulator has no min or max."""
        min_max = MinMax()

        assert min_max.min is None
        assert min_max.max is None
        assert min_max.count == 0

    def test_none_handling(self):
        """A present value always beats None."""
        assert min_of(natural_compare, None, 3) == 3
        assert max_of(natural_compare, 3, None) == 3
        assert min_of(natural_compare, None, None) is None

    def test_custom_comparator(self):
        """The comparator defines the order."""
        by_length = lambda a, b: natural_compare(len(a), len(b))  # noqa: E731
        min_max = MinMax.collect(["bbb", "a", "cc"], by_length)

        assert min_max.min == "a"
        assert min_max.max == "bbb"

    def test_combine_associative_commutative(self):
        """Any grouping and order of partial results gives the same state."""
        rng = np.random.default_rng(42)
        parts = [rng.integers(-100, 100, size=n).tolist() for n in (5, 0, 12, 7)]

        def acc(values):
            return MinMax.collect(values)

        whole = acc(list(chain.from_iterable(parts)))
        left = acc(parts[0]).combine(acc(parts[1])).combine(acc(parts[2]).combine(acc(parts[3])))
        right = acc(parts[3]).combine(acc(parts[2])).combine(acc(parts[1])).combine(acc(parts[0]))

        assert left.same_state(whole)
        assert right.same_state(whole)
        assert left.count == right.count == whole.count

    def test_same_state_preserved(self):
        """Two equal accumulators stay equal after accepting the same value."""
        a = MinMax.collect([4, 8])
        b = MinMax.collect([8, 4, 6])

        assert a.same_state(b)
        a.accept(2)
        b.accept(2)
        assert a.same_state(b)

    def test_callable(self):
        """The accumulator can be used as a consumer."""
        min_max = MinMax()
        for value in (2.5, -1.0):
            min_max(value)

        assert (min_max.min, min_max.max) == (-1.0, 2.5)


class TestFlatMappers:
    """Tests for the strictly monotone and slice flat mappers."""

    def test_strictly_increasing(self):
        """Only values larger than all before are emitted."""
        assert flat_map(to_strictly_increasing(), [5, 3, 7, 2, 8, 8, 9]) == [5, 7, 8, 9]

    def test_strictly_decreasing(self):
        """Only values smaller than all before are emitted."""
        assert flat_map(to_strictly_decreasing(), [5, 6, 3, 3, 4, 1]) == [5, 3, 1]

    def test_strictly_increasing_output_is_increasing(self):
        """Random input gives a strictly increasing output."""
        rng = np.random.default_rng(42)
        output = flat_map(to_strictly_increasing(), rng.integers(0, 1000, size=500).tolist())

        assert all(a < b for a, b in zip(output, output[1:]))

    def test_slice_max(self):
        """The maximum of every full block is emitted."""
        assert flat_map(to_slice_max(3), [1, 5, 2, 7, 3, 4, 9]) == [5, 7]

    def test_slice_min(self):
        """The minimum of every full block is emitted."""
        assert flat_map(to_slice_min(2), [4, 1, 3, 8, 0]) == [1, 3]

    def test_slice_size_one(self):
        """Block size one passes every value through."""
        assert flat_map(to_slice_max(1), [3, 1, 2]) == [3, 1, 2]

    @pytest.mark.parametrize("size", [0, -1])
    def test_slice_size_validated(self, size):
        """Block size must be at least one."""
        with pytest.raises(ValueError):
            to_slice_max(size)

"""
evostream/util/seq.py

Fixed-length ordered sequences.

Two flavours sit on top of one shared storage model:
- ISeq: read-only, safe to share between threads and generations
- MSeq: writable in place, used while building or altering populations

A sequence is a window ``[start, end)`` onto a storage list. Sub-sequences
are views onto the same storage, so writes through an MSeq view are visible
in its parent. Neither flavour can change its length.

MSeq.to_iseq() does not copy: the storage is marked shared and the next
write through the MSeq (or any of its views) copies it first. ISeq.copy()
always copies.

Not synchronized: an MSeq and its views need external locking when used
from several threads.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    TypeVar,
)

import numpy as np

from . import random_registry

T = TypeVar("T")
B = TypeVar("B")


class _Store:
    """Backing list plus copy-on-write flag, shared by all views."""

    __slots__ = ("data", "shared")

    def __init__(self, data: List[Any]):
        self.data = data
        self.shared = False


class Seq(ABC, Generic[T]):
    """
    Read access common to ISeq and MSeq.

    Only ``get`` and ``__len__`` are needed by the shared behaviour below;
    concrete classes add views and mapping.
    """

    __slots__ = ("_store", "_start", "_end")

    def __init__(self, store: _Store, start: int, end: int):
        self._store = store
        self._start = start
        self._end = end

    # ---- element access ----

    def __len__(self) -> int:
        return self._end - self._start

    @property
    def length(self) -> int:
        return self._end - self._start

    def is_empty(self) -> bool:
        return self._end == self._start

    def _check_index(self, index: int) -> int:
        index = operator.index(index)
        if not 0 <= index < len(self):
            raise IndexError(f"Index {index} out of range [0, {len(self)})")
        return index

    def _check_range(self, start: int, end: int) -> None:
        if start < 0 or end > len(self) or start > end:
            raise IndexError(
                f"Invalid range [{start}, {end}) for sequence of length {len(self)}"
            )

    def get(self, index: int) -> T:
        index = self._check_index(index)
        return self._store.data[self._start + index]

    def __getitem__(self, index):
        if isinstance(index, slice):
            start, stop, step = index.indices(len(self))
            if step != 1:
                raise ValueError("Only contiguous slices are supported")
            return self.sub_seq(start, max(start, stop))
        return self.get(index)

    def __iter__(self) -> Iterator[T]:
        data = self._store.data
        for i in range(self._start, self._end):
            yield data[i]

    def __contains__(self, value: object) -> bool:
        return self.index_of(value) >= 0

    # ---- queries ----

    def index_of(self, value: object, start: int = 0) -> int:
        """Index of the first element equal to value, or -1."""
        for i in range(start, len(self)):
            if self.get(i) == value:
                return i
        return -1

    def index_where(self, predicate: Callable[[T], bool]) -> int:
        for i, value in enumerate(self):
            if predicate(value):
                return i
        return -1

    def for_all(self, predicate: Callable[[T], bool]) -> bool:
        return all(predicate(value) for value in self)

    def to_list(self) -> List[T]:
        return self._store.data[self._start:self._end]

    def to_array(self, dtype=None) -> np.ndarray:
        return np.asarray(self.to_list(), dtype=dtype)

    # ---- views and transformations ----

    def sub_seq(self, start: int, end: Optional[int] = None) -> "Seq[T]":
        """
        View of ``[start, end)`` sharing storage with this sequence.

        Raises IndexError if the range is not inside ``[0, len(self)]``.
        """
        if end is None:
            end = len(self)
        self._check_range(start, end)
        return self._view(self._start + start, self._start + end)

    @abstractmethod
    def _view(self, start: int, end: int) -> "Seq[T]":
        pass

    @abstractmethod
    def map(self, mapper: Callable[[T], B]) -> "Seq[B]":
        """New sequence of mapper(element), same length and order."""
        pass

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        # ISeq and MSeq never compare equal; only ISeq is hashable
        if type(other) is not type(self) or len(other) != len(self):
            return False
        return all(a == b for a, b in zip(self, other))

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{', '.join(map(repr, self))}]"


class ISeq(Seq[T]):
    """Immutable sequence. Views share storage with their parent."""

    __slots__ = ()

    EMPTY: "ISeq[Any]"

    def _view(self, start: int, end: int) -> "ISeq[T]":
        if start == end:
            return ISeq.EMPTY
        return ISeq(self._store, start, end)

    def map(self, mapper: Callable[[T], B]) -> "ISeq[B]":
        return ISeq._of_list([mapper(value) for value in self])

    def append(self, *values: T) -> "ISeq[T]":
        """New sequence with values appended; this one stays unchanged."""
        return ISeq._of_list(self.to_list() + list(values))

    def copy(self) -> "MSeq[T]":
        """Writable copy; changes to it never reach this sequence."""
        return MSeq._of_list(self.to_list())

    def __hash__(self) -> int:
        return hash(tuple(self))

    # ---- factories ----

    @classmethod
    def _of_list(cls, data: List[T]) -> "ISeq[T]":
        if not data:
            return cls.EMPTY
        return cls(_Store(data), 0, len(data))

    @classmethod
    def empty(cls) -> "ISeq[T]":
        return cls.EMPTY

    @classmethod
    def of(cls, *values: T) -> "ISeq[T]":
        return cls._of_list(list(values))

    @classmethod
    def from_iterable(cls, values: Iterable[T]) -> "ISeq[T]":
        if isinstance(values, ISeq):
            return values
        if isinstance(values, MSeq):
            return values.to_iseq()
        return cls._of_list(list(values))

    @classmethod
    def generate(cls, supplier: Callable[[], T], length: int) -> "ISeq[T]":
        """Sequence of ``length`` elements, each created by supplier()."""
        return MSeq.generate(supplier, length).to_iseq()


class MSeq(Seq[T]):
    """
    Mutable, fixed-length sequence.

    fill, swap, swap_range and shuffle are written against get/set/len,
    so views get them for free.
    """

    __slots__ = ()

    EMPTY: "MSeq[Any]"

    def _view(self, start: int, end: int) -> "MSeq[T]":
        if start == end:
            return MSeq.EMPTY
        return MSeq(self._store, start, end)

    def _before_write(self) -> None:
        store = self._store
        if store.shared:
            store.data = list(store.data)
            store.shared = False

    def set(self, index: int, value: T) -> None:
        index = self._check_index(index)
        self._before_write()
        self._store.data[self._start + index] = value

    def __setitem__(self, index: int, value: T) -> None:
        self.set(index, value)

    __hash__ = None  # type: ignore[assignment]

    # ---- bulk updates ----

    def set_all(self, values: Iterable[T]) -> "MSeq[T]":
        """Overwrite from the front with values; extra values are ignored."""
        for i, value in zip(range(len(self)), values):
            self.set(i, value)
        return self

    def fill(self, supplier: Callable[[], T]) -> "MSeq[T]":
        for i in range(len(self)):
            self.set(i, supplier())
        return self

    def swap(self, i: int, j: int) -> None:
        temp = self.get(i)
        self.set(i, self.get(j))
        self.set(j, temp)

    def swap_range(
        self,
        start: int,
        end: int,
        other: "MSeq[T]",
        other_start: int,
    ) -> None:
        """
        Exchange ``self[start:end]`` with the equally long range of other
        starting at other_start.

            start                end
              |                   |
        self:  +---+---+---+---+---+---+---+---+
                +---------------+
                        +---------------+
        other: +---+---+---+---+---+---+---+---+
                        |
                    other_start
        """
        self._check_range(start, end)
        size = end - start
        if other_start < 0 or other_start + size > len(other):
            raise IndexError(
                f"Invalid index range: [{other_start}, {other_start + size}) "
                f"for sequence of length {len(other)}"
            )
        for i in range(size - 1, -1, -1):
            temp = self.get(start + i)
            self.set(start + i, other.get(other_start + i))
            other.set(other_start + i, temp)

    def shuffle(self, random: Optional[np.random.Generator] = None) -> "MSeq[T]":
        """
        Randomly permute in place (Fisher-Yates / Knuth, Algorithm P).

        Uses the given generator, or the one bound in random_registry.
        """
        rng = random_registry.resolve(random)
        for j in range(len(self) - 1, 0, -1):
            self.swap(j, int(rng.integers(j + 1)))
        return self

    # ---- conversions ----

    def map(self, mapper: Callable[[T], B]) -> "MSeq[B]":
        return MSeq._of_list([mapper(value) for value in self])

    def copy(self) -> "MSeq[T]":
        return MSeq._of_list(self.to_list())

    def to_iseq(self) -> ISeq[T]:
        """
        Read-only snapshot. Later writes to this sequence are not visible
        through the snapshot.
        """
        if self.is_empty():
            return ISeq.EMPTY
        self._store.shared = True
        return ISeq(_Store(self._store.data), self._start, self._end)

    # ---- factories ----

    @classmethod
    def _of_list(cls, data: List[T]) -> "MSeq[T]":
        if not data:
            return cls.EMPTY
        return cls(_Store(data), 0, len(data))

    @classmethod
    def empty(cls) -> "MSeq[T]":
        return cls.EMPTY

    @classmethod
    def of_length(cls, length: int, value: Optional[T] = None) -> "MSeq[T]":
        if length < 0:
            raise ValueError(f"Length must not be negative: {length}")
        return cls._of_list([value] * length)

    @classmethod
    def of(cls, *values: T) -> "MSeq[T]":
        return cls._of_list(list(values))

    @classmethod
    def from_iterable(cls, values: Iterable[T]) -> "MSeq[T]":
        if isinstance(values, Seq):
            return cls._of_list(values.to_list())
        return cls._of_list(list(values))

    @classmethod
    def generate(cls, supplier: Callable[[], T], length: int) -> "MSeq[T]":
        if supplier is None:
            raise TypeError("supplier must not be None")
        return cls.of_length(length).fill(supplier)


ISeq.EMPTY = ISeq(_Store([]), 0, 0)
MSeq.EMPTY = MSeq(_Store([]), 0, 0)

"""
evostream/util/

Building blocks shared by every layer of the engine:
- Seq: fixed-length sequences (immutable ISeq, mutable MSeq)
- IndexSorter: sort positions, not elements
- random_registry: default random source with scoped overrides
"""

from typing import TypeVar

T = TypeVar("T")


def require_non_null(value: T, name: str) -> T:
    """Return value, failing eagerly if a required collaborator is missing."""
    if value is None:
        raise TypeError(f"{name} must not be None")
    return value


def require_probability(p: float, name: str = "probability") -> float:
    """Check that p lies in [0, 1]."""
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {p}")
    return float(p)


from .seq import Seq, ISeq, MSeq  # noqa: E402
from .index_sorter import IndexSorter, argsort, sort, sort_seq  # noqa: E402
from . import random_registry  # noqa: E402

__all__ = [
    "require_non_null",
    "require_probability",
    "Seq",
    "ISeq",
    "MSeq",
    "IndexSorter",
    "argsort",
    "sort",
    "sort_seq",
    "random_registry",
]

"""
evostream/util/random_registry.py

Where randomized operations get their random numbers from.

Every randomized call in the engine accepts an explicit ``random`` argument
(a ``numpy.random.Generator``). When it is omitted, the generator is looked
up here:

1. A scoped override bound with ``using(...)`` (per thread / per context)
2. The process-wide default, replaceable with ``set_random(...)``

    with random_registry.using(42):
        results = list(islice(engine.stream(), 100))

The override is always restored when the ``with`` block exits, also when
it exits with an exception.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional, Union

import numpy as np

logger = logging.getLogger(__name__)

RandomLike = Union[np.random.Generator, int, None]

_lock = threading.Lock()
_default: np.random.Generator = np.random.default_rng()
_override: ContextVar[Optional[np.random.Generator]] = ContextVar(
    "evostream_random_override", default=None
)


def _to_generator(random: RandomLike) -> np.random.Generator:
    if isinstance(random, np.random.Generator):
        return random
    if random is None or isinstance(random, (int, np.integer)):
        return np.random.default_rng(random)
    raise TypeError(
        f"Expected numpy Generator or integer seed, got {type(random).__name__}"
    )


def get_random() -> np.random.Generator:
    """Return the generator bound for the current context."""
    rng = _override.get()
    if rng is not None:
        return rng
    return _default


def resolve(random: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return the explicit generator if given, the bound one otherwise."""
    return random if random is not None else get_random()


def set_random(random: RandomLike) -> np.random.Generator:
    """Replace the process-wide default generator."""
    global _default
    rng = _to_generator(random)
    with _lock:
        _default = rng
    return rng


def reset() -> None:
    """Restore a freshly seeded process-wide default generator."""
    global _default
    with _lock:
        _default = np.random.default_rng()
    logger.debug("Random registry reset to fresh default generator")


@contextmanager
def using(random: RandomLike) -> Iterator[np.random.Generator]:
    """
    Bind a generator (or a seed) for the duration of a ``with`` block.

    The binding is visible only to the current thread/context. Nested
    blocks shadow outer ones; leaving a block restores the previous binding.
    """
    rng = _to_generator(random)
    token = _override.set(rng)
    try:
        yield rng
    finally:
        _override.reset(token)

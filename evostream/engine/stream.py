"""
evostream/engine/stream.py

The evolution stream: an unbounded, lazily evaluated iterable of
EvolutionResults.

    start --evolve--> result_1 --next/evolve--> result_2 --> ...

Each pull from the iterator runs exactly one generation step, and only on
demand. Every result is produced once; nothing is re-executed. A stream
can be iterated several times: each ``iter()`` is an independent run that
begins with a fresh start from the start supplier.

The stream is strictly sequential. Generation n depends on generation
n - 1, so it cannot be split into independently processed parts.
"""

from __future__ import annotations

import copy
import logging
import math
from typing import Callable, Iterable, Iterator, Optional, Sequence, Tuple

from evostream.genetics import Phenotype
from evostream.util import require_non_null

from .evolution import EvolutionResult, EvolutionStart

logger = logging.getLogger(__name__)

StartSupplier = Callable[[], EvolutionStart]
Evolution = Callable[[EvolutionStart], EvolutionResult]
Limit = Callable[[EvolutionResult], bool]
RunFactory = Callable[[], Tuple[StartSupplier, Evolution]]


class EvolutionIterator(Iterator[EvolutionResult]):
    """
    Iterates the generation step.

    The start is taken from the supplier on the first pull. Afterwards the
    start of every step is ``next()`` of the previous result.
    """

    def __init__(self, start: StartSupplier, evolution: Evolution):
        self._start_supplier = require_non_null(start, "start")
        self._evolution = require_non_null(evolution, "evolution")
        self._start: Optional[EvolutionStart] = None

    def __iter__(self) -> "EvolutionIterator":
        return self

    def __next__(self) -> EvolutionResult:
        if self._start is None:
            self._start = require_non_null(self._start_supplier(), "evolution start")

        result = self._evolution(self._start)
        if result is None:
            raise TypeError("evolution function returned None")

        self._start = result.next()
        return result


def _limited(results: Iterator[EvolutionResult], limits: Sequence[Limit]) -> Iterator[EvolutionResult]:
    for result in results:
        yield result
        # The result that fails a limit is the last one emitted
        if not all(limit(result) for limit in limits):
            return


class EvolutionStream(Iterable[EvolutionResult]):
    """
    Lazy, infinite sequence of generation results.

    Truncate it with ``limit`` (or ``itertools.islice``) before consuming
    it completely; without a limit it never ends.
    """

    # Number of results is unknown
    estimate_size = math.inf

    def __init__(
        self,
        start: StartSupplier,
        evolution: Evolution,
        limits: Sequence[Limit] = (),
    ):
        require_non_null(start, "start")
        require_non_null(evolution, "evolution")
        self._runs: RunFactory = lambda: (start, evolution)
        self._limits = tuple(limits)

    @classmethod
    def of(cls, start: StartSupplier, evolution: Evolution) -> "EvolutionStream":
        return cls(start, evolution)

    @classmethod
    def of_runs(cls, runs: RunFactory, limits: Sequence[Limit] = ()) -> "EvolutionStream":
        """
        Stream whose start supplier and step function are created anew by
        ``runs()`` for every iteration, e.g. to bind a freshly seeded
        generator to each run.
        """
        stream = cls.__new__(cls)
        stream._runs = require_non_null(runs, "runs")
        stream._limits = tuple(limits)
        return stream

    def limit(self, proceed: Limit) -> "EvolutionStream":
        """
        Stream that ends after the first result for which proceed returns
        False. That result is still emitted.
        """
        require_non_null(proceed, "proceed")
        return EvolutionStream.of_runs(self._runs, self._limits + (proceed,))

    def __iter__(self) -> Iterator[EvolutionResult]:
        start, evolution = self._runs()
        results = EvolutionIterator(start, evolution)
        if not self._limits:
            return results
        # Stateful limits count per run, not per stream object
        return _limited(results, [copy.copy(limit) for limit in self._limits])


def best_result(results: Iterable[EvolutionResult]) -> Optional[EvolutionResult]:
    """Consume results and return the one with the best best-fitness."""
    best = None
    for result in results:
        if best is None or result.optimize.compare(result.best_fitness, best.best_fitness) > 0:
            best = result
    return best


def best_phenotype(results: Iterable[EvolutionResult]) -> Optional[Phenotype]:
    """Consume results and return the best phenotype seen."""
    best = best_result(results)
    return best.best_phenotype if best is not None else None

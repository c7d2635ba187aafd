"""
evostream/stat/moments.py

Online descriptive statistics: count, sum, min, max, mean, variance,
skewness and kurtosis, updated one value at a time in O(1).

Two Moments objects that saw different parts of the data can be combined
(Chan et al. / Pébay update formulas), so partial statistics computed per
partition or per worker reduce to the statistics of the whole.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional

import numpy as np


class Moments:
    """
    Mergeable first four central moments.

    Variance is the sample variance (n - 1). Skewness and kurtosis are the
    population estimates; kurtosis is the excess kurtosis (normal = 0).
    Undefined values (too few observations, zero variance) are NaN.
    """

    def __init__(self):
        self._count = 0
        self._sum = 0.0
        self._min: Optional[float] = None
        self._max: Optional[float] = None
        self._mean = 0.0
        self._m2 = 0.0
        self._m3 = 0.0
        self._m4 = 0.0

    @classmethod
    def of(cls, values: Iterable[float] = ()) -> "Moments":
        moments = cls()
        moments.accept_all(values)
        return moments

    def accept(self, value: float) -> None:
        x = float(value)
        n1 = self._count
        self._count += 1
        n = self._count

        delta = x - self._mean
        delta_n = delta / n
        delta_n2 = delta_n * delta_n
        term1 = delta * delta_n * n1

        self._mean += delta_n
        self._m4 += (
            term1 * delta_n2 * (n * n - 3 * n + 3)
            + 6.0 * delta_n2 * self._m2
            - 4.0 * delta_n * self._m3
        )
        self._m3 += term1 * delta_n * (n - 2) - 3.0 * delta_n * self._m2
        self._m2 += term1

        self._sum += x
        self._min = x if self._min is None else min(self._min, x)
        self._max = x if self._max is None else max(self._max, x)

    observe = accept

    def __call__(self, value: float) -> None:
        self.accept(value)

    def accept_all(self, values: Iterable[float]) -> "Moments":
        """Accept a batch; numpy arrays are reduced in one vectorized pass."""
        if not isinstance(values, np.ndarray):
            values = list(values)
        array = np.asarray(values, dtype=float).ravel()
        if array.size == 0:
            return self

        batch = Moments()
        batch._count = int(array.size)
        batch._sum = float(array.sum())
        batch._min = float(array.min())
        batch._max = float(array.max())
        batch._mean = float(array.mean())
        centered = array - batch._mean
        squared = centered * centered
        batch._m2 = float(squared.sum())
        batch._m3 = float((squared * centered).sum())
        batch._m4 = float((squared * squared).sum())
        return self.combine(batch)

    def combine(self, other: "Moments") -> "Moments":
        """Merge other into this accumulator and return this one."""
        if other._count == 0:
            return self
        if self._count == 0:
            self._count = other._count
            self._sum = other._sum
            self._min = other._min
            self._max = other._max
            self._mean = other._mean
            self._m2 = other._m2
            self._m3 = other._m3
            self._m4 = other._m4
            return self

        na, nb = float(self._count), float(other._count)
        n = na + nb
        delta = other._mean - self._mean
        delta2 = delta * delta
        delta3 = delta2 * delta
        delta4 = delta2 * delta2

        m2a, m3a, m4a = self._m2, self._m3, self._m4
        m2b, m3b, m4b = other._m2, other._m3, other._m4

        self._mean = self._mean + delta * nb / n
        self._m2 = m2a + m2b + delta2 * na * nb / n
        self._m3 = (
            m3a + m3b
            + delta3 * na * nb * (na - nb) / (n * n)
            + 3.0 * delta * (na * m2b - nb * m2a) / n
        )
        self._m4 = (
            m4a + m4b
            + delta4 * na * nb * (na * na - na * nb + nb * nb) / (n * n * n)
            + 6.0 * delta2 * (na * na * m2b + nb * nb * m2a) / (n * n)
            + 4.0 * delta * (na * m3b - nb * m3a) / n
        )

        self._count += other._count
        self._sum += other._sum
        self._min = min(self._min, other._min)
        self._max = max(self._max, other._max)
        return self

    # ---- results ----

    @property
    def count(self) -> int:
        return self._count

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def min(self) -> Optional[float]:
        return self._min

    @property
    def max(self) -> Optional[float]:
        return self._max

    @property
    def mean(self) -> float:
        return self._mean if self._count > 0 else math.nan

    @property
    def variance(self) -> float:
        if self._count < 2:
            return math.nan
        return self._m2 / (self._count - 1)

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def skewness(self) -> float:
        if self._count < 3 or self._m2 == 0.0:
            return math.nan
        return math.sqrt(self._count) * self._m3 / self._m2 ** 1.5

    @property
    def kurtosis(self) -> float:
        if self._count < 4 or self._m2 == 0.0:
            return math.nan
        return self._count * self._m4 / (self._m2 * self._m2) - 3.0

    def same_state(self, other: "Moments", rel_tol: float = 1e-9, abs_tol: float = 1e-6) -> bool:
        """
        Same count and (up to float rounding) the same aggregates.

        Combining in a different order changes the last bits of the
        floating point results, hence the tolerance.
        """
        if self is other:
            return True
        if self._count != other._count:
            return False
        if self._count == 0:
            return True

        def close(a: float, b: float) -> bool:
            return math.isclose(a, b, rel_tol=rel_tol, abs_tol=abs_tol)

        return (
            close(self._sum, other._sum)
            and close(self._min, other._min)
            and close(self._max, other._max)
            and close(self._mean, other._mean)
            and close(self._m2, other._m2)
            and close(self._m3, other._m3)
            and close(self._m4, other._m4)
        )

    def __repr__(self) -> str:
        return (
            f"Moments[N={self._count}, mean={self.mean:.6g}, "
            f"var={self.variance:.6g}, skew={self.skewness:.6g}, "
            f"kurt={self.kurtosis:.6g}, min={self._min}, max={self._max}]"
        )

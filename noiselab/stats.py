"""
Incremental mean / mean-of-squares accumulators.

Outcomes are folded one at a time with ``acc += (x - acc) / k``, where ``k`` is
the 1-based number of values folded so far. Accumulators from separate buckets
are merged with the count-weighted form of the same update, so the combined
mean stays the exact mean of every folded value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass
class RunningStats:
    """
    Running mean and mean of squares.

    Attributes:
        count: Number of values folded in.
        mean: Arithmetic mean of the folded values.
        mean_sq: Arithmetic mean of their squares.
    """

    count: int = 0
    mean: float = 0.0
    mean_sq: float = 0.0

    def add(self, value: float) -> None:
        """Fold in one value."""
        value = float(value)
        self.count += 1
        self.mean += (value - self.mean) / self.count
        self.mean_sq += (value * value - self.mean_sq) / self.count

    def extend(self, values: Iterable[float]) -> None:
        for value in values:
            self.add(value)

    def merge(self, other: RunningStats) -> None:
        """
        Fold another accumulator in as ``other.count`` values at its mean.

        With equal counts this is the per-bucket update ``acc += (m - acc) / k``
        applied to bucket means.
        """
        if other.count == 0:
            return
        self.count += other.count
        weight = other.count / self.count
        self.mean += (other.mean - self.mean) * weight
        self.mean_sq += (other.mean_sq - self.mean_sq) * weight

    @property
    def variance(self) -> float:
        """Population variance, ``mean_sq - mean^2`` floored at zero."""
        if self.count == 0:
            return float("nan")
        return max(self.mean_sq - self.mean * self.mean, 0.0)

    @property
    def std_dev(self) -> float:
        return math.sqrt(self.variance)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "mean_sq": self.mean_sq,
            "std_dev": self.std_dev,
        }

    @classmethod
    def of(cls, values: Iterable[float]) -> RunningStats:
        stats = cls()
        stats.extend(values)
        return stats


def fold(buckets: Iterable[RunningStats]) -> RunningStats:
    """Combine bucket accumulators, in the order given, into one."""
    total = RunningStats()
    for bucket in buckets:
        total.merge(bucket)
    return total

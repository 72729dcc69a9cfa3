"""
Scoring rules.

Each scorer maps one sample sequence (plus any rule inputs) to a small tuple
of floats. Scorers are pure; the harness owns drawing sequences and folding
outcomes.
"""

from __future__ import annotations

import numpy as np

from noiselab.types import exploration_size


class SequenceExhaustedError(Exception):
    """Raised when a sequence ends before the running sum reaches the threshold."""

    def __init__(self, length: int, total: float, threshold: float) -> None:
        super().__init__(
            f"sequence of {length} samples summed to {total:.6g}, "
            f"below threshold {threshold:g}"
        )
        self.length = length
        self.total = total
        self.threshold = threshold


def map_to_index(values: np.ndarray | float, n: int) -> np.ndarray:
    """
    Map values in [0, 1) onto integers in [0, n).

    ``min(int(v * n), n - 1)``, so a value rounding up to ``n`` lands on the
    last index.
    """
    values = np.asarray(values, dtype=np.float64)
    return np.minimum((values * n).astype(np.int64), n - 1)


def score_lottery(samples: np.ndarray, winning_index: int, win_frequency: int) -> float:
    """Return 1.0 if any sample maps onto the winning index, else 0.0."""
    tickets = map_to_index(samples, win_frequency)
    return 1.0 if bool(np.any(tickets == winning_index)) else 0.0


def score_sum_to_threshold(samples: np.ndarray, threshold: float = 1.0) -> float:
    """
    Count how many samples it takes for the running sum to reach ``threshold``.

    Raises:
        SequenceExhaustedError: If the whole sequence sums below ``threshold``.
    """
    running = np.cumsum(samples)
    reached = running >= threshold
    if not reached.any():
        raise SequenceExhaustedError(len(samples), float(running[-1]) if len(running) else 0.0, threshold)
    return float(np.argmax(reached) + 1)


def score_candidates(samples: np.ndarray) -> tuple[float, float]:
    """
    Secretary-problem selection.

    The first ``int(K / e)`` samples are only observed; the first later sample
    above their maximum is picked. If none is, the pick falls back to index
    ``K - 1`` holding the observed maximum.

    Returns:
        ``(index, rank)``: the pick position and the number of samples strictly
        greater than the picked value.
    """
    count = len(samples)
    explore = exploration_size(count)
    if explore < 1 or explore >= count:
        raise ValueError(f"cannot form an exploration phase from {count} candidates")

    best_seen = float(np.max(samples[:explore]))
    better = np.flatnonzero(samples[explore:] > best_seen)
    if better.size:
        index = explore + int(better[0])
        chosen = float(samples[index])
    else:
        index = count - 1
        chosen = best_seen

    rank = int(np.count_nonzero(samples > chosen))
    return float(index), float(rank)


def score_derangement(samples: np.ndarray) -> float:
    """
    Return 1.0 if the ranking of ``samples`` is a derangement.

    The samples' stable sort order is read as a shuffled deck; it is a
    derangement when no card stays in its original position.
    """
    order = np.argsort(samples, kind="stable")
    fixed = order == np.arange(len(samples))
    return 0.0 if bool(fixed.any()) else 1.0

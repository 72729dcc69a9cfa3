"""
White noise and low-discrepancy generators.

Every generator maps ``(count, stream_index, run_seed)`` to a fresh float64
array of ``count`` values in [0, 1). The same arguments always give the same
sequence.
"""

from __future__ import annotations

import numpy as np

from noiselab.seeds.source import UniformBitSource, shuffle
from noiselab.sequences._unit import check_count, clamp_unit

GOLDEN_RATIO_CONJUGATE = 0.61803398875


def white_noise(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """``count`` independent uniform draws from a fresh source."""
    count = check_count(count)
    return UniformBitSource(run_seed, stream_index).floats(count)


def golden_ratio(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """
    Additive recurrence ``x[i] = (x[i-1] + 1/phi) mod 1``.

    The starting point is one white noise draw. The recurrence is evaluated in
    closed form, ``(x[0] + i/phi) mod 1``, which agrees with the step-by-step
    form up to float rounding.
    """
    count = check_count(count)
    start = white_noise(1, stream_index, run_seed)[0]
    values = np.fmod(start + np.arange(count, dtype=np.float64) * GOLDEN_RATIO_CONJUGATE, 1.0)
    return clamp_unit(values)


def stratified(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """Jittered regular sampling: ``(i + u_i) / count`` with independent ``u_i``."""
    count = check_count(count)
    jitter = white_noise(count, stream_index, run_seed)
    values = (np.arange(count, dtype=np.float64) + jitter) / count
    return clamp_unit(values)


def regular_offset(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """One jittered regular grid: ``(i + o) / count`` with a single offset ``o``."""
    count = check_count(count)
    offset = white_noise(1, stream_index, run_seed)[0]
    values = (np.arange(count, dtype=np.float64) + offset) / count
    return clamp_unit(values)


def shuffle_key(stream_index: int, run_seed: int) -> int:
    """Key for the order-removing shuffle of a stream."""
    return int(stream_index) ^ int(run_seed)


def stratified_shuffled(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """:func:`stratified` with its ascending order removed."""
    values = stratified(count, stream_index, run_seed)
    return shuffle(values, shuffle_key(stream_index, run_seed))


def regular_offset_shuffled(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """:func:`regular_offset` with its ascending order removed."""
    values = regular_offset(count, stream_index, run_seed)
    return shuffle(values, shuffle_key(stream_index, run_seed))

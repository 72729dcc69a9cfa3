"""
Block colored noise: finite difference of white noise plus exact remap.

The sum (red) or difference (blue) of two adjacent uniform draws, scaled into
[0, 1], is triangularly distributed. Passing it through the triangular CDF makes
the marginal exactly uniform again while keeping the neighbour correlation.
"""

from __future__ import annotations

import numpy as np

from noiselab.sequences._unit import check_count, clamp_unit
from noiselab.sequences.lowdisc import white_noise


def triangle_to_uniform(x: np.ndarray | float) -> np.ndarray:
    """
    Map a symmetric triangular variate on [0, 1] to a uniform one.

    Applies the triangular CDF: ``2x^2`` on the lower half and its mirror
    ``1 - 2(1-x)^2`` on the upper half. Both halves are computed and the result
    is selected with ``numpy.where``, so there is no per-element branch.

    Args:
        x: Scalar or array of values in [0, 1].

    Returns:
        An array of the same shape with values in [0, 1].
    """
    x = np.asarray(x, dtype=np.float64)
    lower = 2.0 * x * x
    mirrored = 1.0 - x
    upper = 1.0 - 2.0 * mirrored * mirrored
    return np.where(x < 0.5, lower, upper)


def _pairs(count: int, stream_index: int, run_seed: int) -> tuple[np.ndarray, np.ndarray]:
    white = white_noise(count + 1, stream_index, run_seed)
    return white[1:], white[:-1]


def blue_noise_block(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """High-pass filtered noise: remapped difference of adjacent draws."""
    count = check_count(count)
    current, previous = _pairs(count, stream_index, run_seed)
    triangular = (current - previous) * 0.5 + 0.5
    return clamp_unit(triangle_to_uniform(triangular))


def red_noise_block(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    """Low-pass filtered noise: remapped average of adjacent draws."""
    count = check_count(count)
    current, previous = _pairs(count, stream_index, run_seed)
    triangular = (current + previous) * 0.5
    return clamp_unit(triangle_to_uniform(triangular))

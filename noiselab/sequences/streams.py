"""
Streaming colored noise.

FilteredNoiseStream runs uniform white noise through a 3-tap filter and
restores a roughly uniform marginal with a piecewise cubic fit of the filtered
distribution's CDF. SingleBitBlueStream is a cheaper blue noise built from one
random sign bit per sample and a halving feedback term.

Streams hold private state and are not shared across trials or threads.
"""

from __future__ import annotations

import numpy as np

from noiselab.seeds.source import UniformBitSource
from noiselab.sequences._unit import check_count, clamp_unit

# Rows are segments [0, .25), [.25, .5), [.5, .75), [.75, 1]; columns are the
# cubic, quadratic, linear and constant coefficients. Fitted offline.
POLYNOMIAL_COEFFICIENTS = np.array(
    [
        [5.25964, 0.039474, 0.000708779, 0.0],
        [-5.20987, 7.82905, -1.93105, 0.159677],
        [-5.22644, 7.8272, -1.91677, 0.15507],
        [5.23882, -15.761, 15.8054, -4.28323],
    ],
    dtype=np.float64,
)

BLUE_TAPS = (0.5, -1.0, 0.5)
RED_TAPS = (0.25, 0.5, 0.25)


def polynomial_cdf(x: np.ndarray | float) -> np.ndarray:
    """
    Evaluate the fitted piecewise cubic CDF at ``x``.

    The segment is ``min(int(4x), 3)``; an input of exactly 1.0 resolves to the
    last segment and anything below 0 to the first. Evaluated in Horner form.
    """
    x = np.asarray(x, dtype=np.float64)
    segment = np.clip((x * 4.0).astype(np.int64), 0, 3)
    c = POLYNOMIAL_COEFFICIENTS[segment]
    return c[..., 3] + x * (c[..., 2] + x * (c[..., 1] + x * c[..., 0]))


class FilteredNoiseStream:
    """
    3-tap filtered uniform noise with a polynomial CDF correction.

    Subclasses set ``taps`` and :meth:`normalize`.

    Example:
        stream = BlueNoiseStream(UniformBitSource(run_seed=1, stream_index=5))
        first = stream.next()
        rest = stream.take(99)
    """

    taps: tuple[float, float, float] = (1.0, 0.0, 0.0)

    def __init__(self, source: UniformBitSource) -> None:
        self._source = source
        older = source.next_float()
        # [most recent, older]
        self._history = [source.next_float(), older]

    @staticmethod
    def normalize(y: np.ndarray | float) -> np.ndarray | float:
        return y

    def next(self) -> float:
        """Draw one value and return the next corrected sample."""
        value = self._source.next_float()
        t0, t1, t2 = self.taps
        y = value * t0 + self._history[0] * t1 + self._history[1] * t2
        self._history[1] = self._history[0]
        self._history[0] = value
        x = self.normalize(y)
        return float(clamp_unit(np.atleast_1d(polynomial_cdf(x)))[0])

    def take(self, count: int) -> np.ndarray:
        """
        Return the next ``count`` samples at once.

        Equivalent to ``count`` calls to :meth:`next`, including the history
        left behind.
        """
        count = check_count(count)
        draws = self._source.floats(count)
        chain = np.concatenate(([self._history[1], self._history[0]], draws))
        t0, t1, t2 = self.taps
        y = chain[2:] * t0 + chain[1:-1] * t1 + chain[:-2] * t2
        self._history = [float(chain[-1]), float(chain[-2])]
        return clamp_unit(polynomial_cdf(self.normalize(y)))

    @property
    def history(self) -> tuple[float, float]:
        """The two lagged raw draws, most recent first."""
        return self._history[0], self._history[1]


class BlueNoiseStream(FilteredNoiseStream):
    """High-pass stream. The taps sum to zero, so output is rescaled from [-1, 1]."""

    taps = BLUE_TAPS

    @staticmethod
    def normalize(y):
        return y * 0.5 + 0.5


class RedNoiseStream(FilteredNoiseStream):
    """Low-pass stream. The taps sum to one, so output is already in [0, 1]."""

    taps = RED_TAPS


class SingleBitBlueStream:
    """
    Approximate blue noise from one random bit per sample.

    Each sample is ``+-1/2`` minus half of the previous sample, which pushes
    consecutive values apart. The bit comes from a tiny quadratic generator on a
    32-bit state; no CDF correction is applied.
    """

    def __init__(self, seed: int) -> None:
        self._seed = int(seed) & 0xFFFFFFFF
        self._p = 0.0

    @classmethod
    def from_source(cls, source: UniformBitSource) -> SingleBitBlueStream:
        return cls(source.next_uint32())

    def _random_bit(self) -> bool:
        self._seed = (self._seed + ((self._seed * self._seed) | 5)) & 0xFFFFFFFF
        return (self._seed & 0x80000000) != 0

    def next(self) -> float:
        ret = (0.5 if self._random_bit() else -0.5) - self._p
        self._p = ret / 2.0
        return ret * 0.5 + 0.5

    def take(self, count: int) -> np.ndarray:
        count = check_count(count)
        out = np.empty(count, dtype=np.float64)
        for i in range(count):
            out[i] = self.next()
        return out


def blue_noise_stream(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    return BlueNoiseStream(UniformBitSource(run_seed, stream_index)).take(count)


def red_noise_stream(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    return RedNoiseStream(UniformBitSource(run_seed, stream_index)).take(count)


def blue_noise_single_bit(count: int, stream_index: int, run_seed: int) -> np.ndarray:
    stream = SingleBitBlueStream.from_source(UniformBitSource(run_seed, stream_index))
    return stream.take(count)

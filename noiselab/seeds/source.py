"""
UniformBitSource: Seedable, splittable 32-bit uniform source.

Every stream is a numpy PCG64 bit generator built from a SeedSequence whose
entropy is the run seed and whose spawn key is the stream index, so two
distinct indices never share state or a seeding path.
"""

from __future__ import annotations

import numpy as np

_MASK64 = (1 << 64) - 1
_INV_2_32 = 2.0**-32


def _as_u64(value: int) -> int:
    return int(value) & _MASK64


class UniformBitSource:
    """
    A short-lived uniform random source for one stream index.

    Attributes:
        run_seed: The run seed this source was built from.
        stream_index: The stream index selecting the sub-stream.

    Example:
        source = UniformBitSource(run_seed=42, stream_index=7)
        u = source.next_float()          # one float in [0, 1)
        block = source.floats(1000)      # 1000 more, same stream
    """

    __slots__ = ("run_seed", "stream_index", "_bitgen")

    def __init__(self, run_seed: int, stream_index: int) -> None:
        self.run_seed = _as_u64(run_seed)
        self.stream_index = _as_u64(stream_index)
        sequence = np.random.SeedSequence(
            entropy=self.run_seed, spawn_key=(self.stream_index,)
        )
        self._bitgen = np.random.PCG64(sequence)

    def next_uint32(self) -> int:
        """Return the upper 32 bits of the next raw 64-bit draw."""
        return int(self._bitgen.random_raw()) >> 32

    def next_float(self) -> float:
        """Return the next value as a float in [0, 1)."""
        return self.next_uint32() * _INV_2_32

    def uint32(self, n: int) -> np.ndarray:
        """
        Draw ``n`` 32-bit values.

        Consumes the stream in the same order as ``n`` calls to
        :meth:`next_uint32`.
        """
        raw = self._bitgen.random_raw(n)
        return (raw >> np.uint64(32)).astype(np.uint32)

    def floats(self, n: int) -> np.ndarray:
        """Draw ``n`` floats in [0, 1) (scaled by 2**-32, no rounding to 1.0)."""
        return np.ldexp(self.uint32(n).astype(np.float64), -32)

    def __repr__(self) -> str:
        return f"UniformBitSource(run_seed={self.run_seed}, stream_index={self.stream_index})"


def seed(run_seed: int, stream_index: int) -> UniformBitSource:
    """Create a fresh source for ``stream_index`` under ``run_seed``."""
    return UniformBitSource(run_seed, stream_index)


def shuffle(values: np.ndarray, key: int) -> np.ndarray:
    """
    Fisher-Yates shuffle ``values`` in place, keyed by ``key``.

    The key generator is seeded directly from ``key`` (no spawn key), so it
    never coincides with a :class:`UniformBitSource` stream.

    Returns:
        The same array, shuffled.
    """
    rng = np.random.Generator(np.random.PCG64(_as_u64(key)))
    rng.shuffle(values)
    return values

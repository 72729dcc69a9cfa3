"""
Stream index derivation.

A StreamIndexer maps a trial position (outer bucket, inner trial, sub-draw slot)
to a unique stream index inside one contiguous block. A StreamAllocator hands out
non-overlapping blocks, one per experiment/generator pair, so no two trials of a
run ever share an index.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator

MAX_STREAM_INDEX = (1 << 64) - 1


@dataclass(frozen=True)
class StreamIndexer:
    """
    Affine map from ``(outer, inner, slot)`` to a stream index.

    ``index = base + (outer * inner_trials + inner) * slots + slot``

    Attributes:
        base: First index of the block.
        outer_trials: Number of outer buckets.
        inner_trials: Number of trials per bucket.
        slots: Number of sub-draws per trial.
    """

    base: int
    outer_trials: int
    inner_trials: int
    slots: int = 1

    def __post_init__(self) -> None:
        for name in ("outer_trials", "inner_trials", "slots"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.base < 0:
            raise ValueError(f"base must be non-negative, got {self.base}")
        if self.end - 1 > MAX_STREAM_INDEX:
            raise ValueError("stream index block exceeds 64 bits")

    @property
    def span(self) -> int:
        """Number of indices in the block."""
        return self.outer_trials * self.inner_trials * self.slots

    @property
    def end(self) -> int:
        """One past the last index of the block."""
        return self.base + self.span

    def index(self, outer: int, inner: int, slot: int = 0) -> int:
        """
        Return the stream index for one sub-draw of one trial.

        Raises:
            IndexError: If any coordinate is outside the configured bounds.
        """
        if not 0 <= outer < self.outer_trials:
            raise IndexError(f"outer index {outer} out of range [0, {self.outer_trials})")
        if not 0 <= inner < self.inner_trials:
            raise IndexError(f"inner index {inner} out of range [0, {self.inner_trials})")
        if not 0 <= slot < self.slots:
            raise IndexError(f"slot {slot} out of range [0, {self.slots})")
        return self.base + (outer * self.inner_trials + inner) * self.slots + slot

    def __iter__(self) -> Iterator[int]:
        """Yield every index of the block in trial order."""
        for outer in range(self.outer_trials):
            for inner in range(self.inner_trials):
                for slot in range(self.slots):
                    yield self.index(outer, inner, slot)

    def overlaps(self, other: StreamIndexer) -> bool:
        return self.base < other.end and other.base < self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "base": self.base,
            "outer_trials": self.outer_trials,
            "inner_trials": self.inner_trials,
            "slots": self.slots,
        }


class StreamAllocator:
    """
    Allocates consecutive, disjoint index blocks.

    Example:
        allocator = StreamAllocator()
        white = allocator.allocate(outer_trials=100, inner_trials=10, slots=2)
        golden = allocator.allocate(outer_trials=100, inner_trials=10, slots=2)
        assert not white.overlaps(golden)
    """

    def __init__(self, start: int = 0) -> None:
        self._cursor = start

    @property
    def cursor(self) -> int:
        """The base of the next block."""
        return self._cursor

    def allocate(self, outer_trials: int, inner_trials: int, slots: int = 1) -> StreamIndexer:
        indexer = StreamIndexer(
            base=self._cursor,
            outer_trials=outer_trials,
            inner_trials=inner_trials,
            slots=slots,
        )
        self._cursor = indexer.end
        return indexer

    def __repr__(self) -> str:
        return f"StreamAllocator(cursor={self._cursor})"

"""
Generator registry.

Maps each GeneratorKind to its ``generate(count, stream_index, run_seed)``
function.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable

import numpy as np

from noiselab.sequences.color import blue_noise_block, red_noise_block
from noiselab.sequences.lowdisc import (
    golden_ratio,
    regular_offset,
    regular_offset_shuffled,
    stratified,
    stratified_shuffled,
    white_noise,
)
from noiselab.sequences.streams import (
    blue_noise_single_bit,
    blue_noise_stream,
    red_noise_stream,
)

GenerateFn = Callable[[int, int, int], np.ndarray]


class GeneratorKind(str, Enum):
    """Sampling strategies available to experiments."""

    WHITE = "white"
    GOLDEN_RATIO = "golden_ratio"
    STRATIFIED = "stratified"
    STRATIFIED_SHUFFLED = "stratified_shuffled"
    REGULAR_OFFSET = "regular_offset"
    REGULAR_OFFSET_SHUFFLED = "regular_offset_shuffled"
    BLUE_BLOCK = "blue_block"
    RED_BLOCK = "red_block"
    BLUE_STREAM = "blue_stream"
    RED_STREAM = "red_stream"
    BLUE_SINGLE_BIT = "blue_single_bit"

    @property
    def label(self) -> str:
        return _LABELS[self]


_GENERATORS: dict[GeneratorKind, GenerateFn] = {
    GeneratorKind.WHITE: white_noise,
    GeneratorKind.GOLDEN_RATIO: golden_ratio,
    GeneratorKind.STRATIFIED: stratified,
    GeneratorKind.STRATIFIED_SHUFFLED: stratified_shuffled,
    GeneratorKind.REGULAR_OFFSET: regular_offset,
    GeneratorKind.REGULAR_OFFSET_SHUFFLED: regular_offset_shuffled,
    GeneratorKind.BLUE_BLOCK: blue_noise_block,
    GeneratorKind.RED_BLOCK: red_noise_block,
    GeneratorKind.BLUE_STREAM: blue_noise_stream,
    GeneratorKind.RED_STREAM: red_noise_stream,
    GeneratorKind.BLUE_SINGLE_BIT: blue_noise_single_bit,
}

_LABELS: dict[GeneratorKind, str] = {
    GeneratorKind.WHITE: "White Noise",
    GeneratorKind.GOLDEN_RATIO: "Golden Ratio",
    GeneratorKind.STRATIFIED: "Stratified",
    GeneratorKind.STRATIFIED_SHUFFLED: "Stratified (shuffled)",
    GeneratorKind.REGULAR_OFFSET: "Regular Offset",
    GeneratorKind.REGULAR_OFFSET_SHUFFLED: "Regular Offset (shuffled)",
    GeneratorKind.BLUE_BLOCK: "Blue Noise (block)",
    GeneratorKind.RED_BLOCK: "Red Noise (block)",
    GeneratorKind.BLUE_STREAM: "Blue Noise (stream)",
    GeneratorKind.RED_STREAM: "Red Noise (stream)",
    GeneratorKind.BLUE_SINGLE_BIT: "Blue Noise (single bit)",
}


def get_generator(kind: GeneratorKind | str) -> GenerateFn:
    """
    Look up the generate function for a kind.

    Raises:
        ValueError: If ``kind`` is not a known generator name.
    """
    try:
        return _GENERATORS[GeneratorKind(kind)]
    except ValueError:
        available = ", ".join(k.value for k in GeneratorKind)
        raise ValueError(
            f"Unknown generator {kind!r}. Available generators: {available}"
        ) from None


def generate(
    kind: GeneratorKind | str, count: int, stream_index: int, run_seed: int
) -> np.ndarray:
    """Generate ``count`` samples of ``kind`` for one stream."""
    return get_generator(kind)(count, stream_index, int(run_seed))


def list_generators() -> list[GeneratorKind]:
    return list(GeneratorKind)

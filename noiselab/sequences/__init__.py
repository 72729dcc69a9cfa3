"""
Sequences module: Deterministic, seedable sample-sequence generators.

Provides:

- White noise and low-discrepancy sequences (golden ratio, stratified,
  regular offset, shuffled variants)
- Block colored noise with an exact triangular remap
- Streaming colored noise with a polynomial CDF correction
- GeneratorKind / generate(): registry of every generator
"""

from noiselab.sequences.color import blue_noise_block, red_noise_block, triangle_to_uniform
from noiselab.sequences.lowdisc import (
    GOLDEN_RATIO_CONJUGATE,
    golden_ratio,
    regular_offset,
    regular_offset_shuffled,
    stratified,
    stratified_shuffled,
    white_noise,
)
from noiselab.sequences.registry import (
    GeneratorKind,
    generate,
    get_generator,
    list_generators,
)
from noiselab.sequences.streams import (
    POLYNOMIAL_COEFFICIENTS,
    BlueNoiseStream,
    FilteredNoiseStream,
    RedNoiseStream,
    SingleBitBlueStream,
    polynomial_cdf,
)

__all__ = [
    "GOLDEN_RATIO_CONJUGATE",
    "POLYNOMIAL_COEFFICIENTS",
    "BlueNoiseStream",
    "FilteredNoiseStream",
    "GeneratorKind",
    "RedNoiseStream",
    "SingleBitBlueStream",
    "blue_noise_block",
    "generate",
    "get_generator",
    "golden_ratio",
    "list_generators",
    "polynomial_cdf",
    "red_noise_block",
    "regular_offset",
    "regular_offset_shuffled",
    "stratified",
    "stratified_shuffled",
    "triangle_to_uniform",
    "white_noise",
]

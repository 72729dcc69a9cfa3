"""
Seeds module: Explicit RNG control with deterministic derivation.

Provides:

- RunSeed: The run-wide seed (fixed or drawn from entropy)
- UniformBitSource: Per-stream 32-bit uniform source
- StreamIndexer: Collision-free stream index derivation
- StreamAllocator: Disjoint index blocks per experiment/generator pair
"""

from noiselab.seeds.bundle import RunSeed
from noiselab.seeds.plan import StreamAllocator, StreamIndexer
from noiselab.seeds.source import UniformBitSource, seed, shuffle

__all__ = [
    "RunSeed",
    "StreamAllocator",
    "StreamIndexer",
    "UniformBitSource",
    "seed",
    "shuffle",
]

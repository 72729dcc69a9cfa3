"""
RunSeed: The one process-wide seed of a run.

A RunSeed is either fixed (deterministic, reproducible runs) or drawn once from
the operating system's entropy pool at start. It is passed explicitly into
every generator and harness call.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Any

DEFAULT_DETERMINISTIC_SEED = 0


def _normalize_seed(seed: int) -> int:
    """Normalize seed to the unsigned 64-bit range."""
    return int(seed) & ((1 << 64) - 1)


@dataclass(frozen=True)
class RunSeed:
    """
    Seed shared read-only by every trial of a run.

    Attributes:
        value: The 64-bit seed combined with every stream index.
        deterministic: True if the seed was fixed rather than drawn from entropy.
    """

    value: int
    deterministic: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _normalize_seed(self.value))

    def __int__(self) -> int:
        return self.value

    @classmethod
    def fixed(cls, value: int = DEFAULT_DETERMINISTIC_SEED) -> RunSeed:
        """Create a seed for deterministic mode."""
        return cls(value=value, deterministic=True)

    @classmethod
    def from_entropy(cls) -> RunSeed:
        """Draw a 64-bit seed from the OS entropy pool."""
        return cls(value=secrets.randbits(64), deterministic=False)

    @classmethod
    def resolve(cls, deterministic: bool, value: int | None = None) -> RunSeed:
        """
        Pick the seed for a run from the deterministic mode switch.

        Args:
            deterministic: Use a fixed seed when True, entropy otherwise.
            value: The fixed seed (default: 0). Ignored when not deterministic.
        """
        if deterministic:
            return cls.fixed(DEFAULT_DETERMINISTIC_SEED if value is None else value)
        return cls.from_entropy()

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "deterministic": self.deterministic}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunSeed:
        return cls(value=data["value"], deterministic=data.get("deterministic", True))

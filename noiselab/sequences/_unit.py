"""Helpers for keeping sample values inside the half-open unit interval."""

from __future__ import annotations

import numpy as np

# Largest float64 strictly below 1.0.
ONE_BELOW = float(np.nextafter(1.0, 0.0))


def clamp_unit(values: np.ndarray) -> np.ndarray:
    """Clamp values into [0, 1) in place and return them."""
    return np.clip(values, 0.0, ONE_BELOW, out=values)


def check_count(count: int) -> int:
    """Validate a requested sequence length."""
    count = int(count)
    if count < 1:
        raise ValueError(f"count must be positive, got {count}")
    return count

"""
Core types for noiselab (PUBLIC).

This module defines the fundamental data structures shared by the harness,
the configuration layer and the runner:
- RuleKind: The closed set of scoring rules
- ExperimentConfig: Validated settings of one experiment
- ConfigurationError: Raised for degenerate settings before any trial runs
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from noiselab.sequences.registry import GeneratorKind

# Largest lottery size whose indices are all reachable from a 32-bit draw.
MAX_WIN_FREQUENCY = 2**32


class ConfigurationError(ValueError):
    """Raised when experiment settings cannot produce a valid run."""


class RuleKind(str, Enum):
    """Scoring rules an experiment can apply to a sample sequence."""

    LOTTERY = "lottery"
    SUM_TO_THRESHOLD = "sum"
    CANDIDATES = "candidates"
    DERANGEMENT = "derangement"

    @property
    def slots(self) -> int:
        """Number of independent sub-draws per trial."""
        return 2 if self is RuleKind.LOTTERY else 1

    @property
    def outcome_names(self) -> tuple[str, ...]:
        return _OUTCOME_NAMES[self]

    @property
    def expected(self) -> float | None:
        """Analytic mean of the primary outcome for white noise, if known."""
        return _EXPECTED[self]

    @property
    def default_size(self) -> int:
        return _DEFAULT_SIZES[self]


_OUTCOME_NAMES = {
    RuleKind.LOTTERY: ("win",),
    RuleKind.SUM_TO_THRESHOLD: ("count",),
    RuleKind.CANDIDATES: ("index", "rank"),
    RuleKind.DERANGEMENT: ("deranged",),
}

_EXPECTED = {
    RuleKind.LOTTERY: 1.0 - 1.0 / math.e,
    RuleKind.SUM_TO_THRESHOLD: math.e,
    RuleKind.CANDIDATES: None,
    RuleKind.DERANGEMENT: 1.0 / math.e,
}

_DEFAULT_SIZES = {
    RuleKind.LOTTERY: 10_000,
    RuleKind.SUM_TO_THRESHOLD: 25,
    RuleKind.CANDIDATES: 100,
    RuleKind.DERANGEMENT: 100,
}


def exploration_size(candidates: int) -> int:
    """Length of the look-but-don't-pick phase for ``candidates`` values."""
    return int(candidates / math.e)


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class ExperimentConfig:
    """
    Settings for running one rule against a set of generators.

    Attributes:
        name: Experiment name (the key under ``[experiments]``).
        rule: The scoring rule.
        outer_trials: Number of independent buckets.
        inner_trials: Number of sequential trials per bucket.
        size: Rule size: win frequency (lottery), draw size (sum), candidate
            pool (candidates) or deck size (derangement).
        threshold: Target sum for the sum rule.
        generators: Generators to run, in order.
    """

    name: str
    rule: RuleKind
    outer_trials: int
    inner_trials: int
    size: int
    threshold: float = 1.0
    generators: tuple[GeneratorKind, ...] = field(default_factory=lambda: tuple(GeneratorKind))

    @property
    def total_trials(self) -> int:
        return self.outer_trials * self.inner_trials

    def validate(self) -> ExperimentConfig:
        """
        Check every precondition of the rule.

        Returns:
            self, for chaining.

        Raises:
            ConfigurationError: On any degenerate setting.
        """
        validate_rule_settings(
            self.rule,
            outer_trials=self.outer_trials,
            inner_trials=self.inner_trials,
            size=self.size,
            threshold=self.threshold,
        )
        if not self.generators:
            raise ConfigurationError(f"experiment {self.name!r} has no generators")
        return self

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> ExperimentConfig:
        """
        Parse one ``[experiments.NAME]`` table.

        The rule defaults to the table name, the size to the rule's default,
        and the generators to all of them.

        Raises:
            ConfigurationError: On unknown names or invalid values.
        """
        rule_name = data.get("rule", name)
        try:
            rule = RuleKind(rule_name)
        except ValueError:
            available = ", ".join(r.value for r in RuleKind)
            raise ConfigurationError(
                f"Unknown rule {rule_name!r} in experiment {name!r}. "
                f"Available rules: {available}"
            ) from None

        generators_raw = data.get("generators")
        if generators_raw is None:
            generators = tuple(GeneratorKind)
        elif isinstance(generators_raw, str):
            raise ConfigurationError(
                f"experiment {name!r}: generators must be a list, got {generators_raw!r}"
            )
        else:
            try:
                generators = tuple(GeneratorKind(g) for g in generators_raw)
            except ValueError as e:
                raise ConfigurationError(f"experiment {name!r}: {e}") from None

        threshold = data.get("threshold", 1.0)
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise ConfigurationError(f"threshold must be a number, got {threshold!r}")

        return cls(
            name=name,
            rule=rule,
            outer_trials=_positive_int("outer_trials", data.get("outer_trials", 1)),
            inner_trials=_positive_int("inner_trials", data.get("inner_trials", 1)),
            size=_positive_int("size", data.get("size", rule.default_size)),
            threshold=float(threshold),
            generators=generators,
        ).validate()

    def to_dict(self) -> dict[str, Any]:
        return {
            "rule": self.rule.value,
            "outer_trials": self.outer_trials,
            "inner_trials": self.inner_trials,
            "size": self.size,
            "threshold": self.threshold,
            "generators": [g.value for g in self.generators],
        }


def validate_rule_settings(
    rule: RuleKind,
    *,
    outer_trials: int,
    inner_trials: int,
    size: int,
    threshold: float = 1.0,
) -> None:
    """
    Fail fast on settings that would break a run partway through.

    Raises:
        ConfigurationError: On zero counts, an out-of-range lottery, an empty
            exploration phase, or a non-positive threshold.
    """
    _positive_int("outer_trials", outer_trials)
    _positive_int("inner_trials", inner_trials)
    _positive_int("size", size)

    if rule is RuleKind.LOTTERY and size > MAX_WIN_FREQUENCY:
        raise ConfigurationError(
            f"win frequency {size} exceeds the 32-bit sample resolution ({MAX_WIN_FREQUENCY})"
        )
    if rule is RuleKind.CANDIDATES:
        explore = exploration_size(size)
        if explore < 1 or explore >= size:
            raise ConfigurationError(
                f"candidate pool of {size} leaves an exploration phase of {explore}; "
                "need at least 1 explored and 1 remaining candidate"
            )
    if rule is RuleKind.SUM_TO_THRESHOLD and not threshold > 0:
        raise ConfigurationError(f"threshold must be positive, got {threshold}")

"""
ProjectConfig: Project-level configuration loader for noiselab.

This module provides:

- find_config_file: Walk up directories to locate .noiselab.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- RunSettings / ExecutorSettings / ProgressSettings: Typed config sections
- ProjectConfig: Main config object with load/select interface

Configuration is loaded from `.noiselab.toml` with optional
`.noiselab.local.toml` overrides. The resolution order is:

    built-in defaults → .noiselab.toml → .noiselab.local.toml

Example:
    >>> config = ProjectConfig.load()
    >>> config.run.deterministic
    False
    >>> config.experiments["lottery"].size
    10000
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Iterable

from noiselab.seeds.bundle import RunSeed
from noiselab.sequences.registry import GeneratorKind
from noiselab.types import ConfigurationError, ExperimentConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".noiselab.toml"
LOCAL_CONFIG_FILENAME = ".noiselab.local.toml"

DEFAULT_CONFIG: dict[str, Any] = {
    "run": {"deterministic": False, "seed": 0},
    "executor": {"type": "process"},
    "progress": {"style": "rich", "interval": 0.25},
    "experiments": {
        "lottery": {"rule": "lottery", "outer_trials": 100, "inner_trials": 10, "size": 10_000},
        "sum": {"rule": "sum", "outer_trials": 1000, "inner_trials": 100, "size": 25},
        "candidates": {"rule": "candidates", "outer_trials": 1000, "inner_trials": 100, "size": 100},
        "derangement": {"rule": "derangement", "outer_trials": 1000, "inner_trials": 100, "size": 100},
    },
}

PROGRESS_STYLES = ("rich", "simple", "none")


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find `.noiselab.toml`.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Neither input is mutated; a new dict is returned.
    """
    merged: dict[str, Any] = {}

    for key in base.keys() | override.keys():
        if key in base and key in override:
            base_val = base[key]
            over_val = override[key]
            if isinstance(base_val, dict) and isinstance(over_val, dict):
                merged[key] = deep_merge(base_val, over_val)
            else:
                merged[key] = over_val
        elif key in base:
            merged[key] = base[key]
        else:
            merged[key] = override[key]

    return merged


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunSettings:
    """
    The ``[run]`` table.

    Attributes:
        deterministic: Use the fixed ``seed`` instead of OS entropy.
        seed: Seed for deterministic mode.
    """

    deterministic: bool = False
    seed: int = 0

    def run_seed(self) -> RunSeed:
        """Resolve the run seed (draws entropy once when not deterministic)."""
        return RunSeed.resolve(self.deterministic, self.seed)


@dataclass(frozen=True)
class ExecutorSettings:
    """
    The ``[executor]`` table.

    Attributes:
        type: Registered executor type (``serial``, ``thread``, ``process``).
        options: Remaining keys, passed to the executor config class.
    """

    type: str = "process"
    options: dict[str, Any] = field(default_factory=dict)

    def create(self) -> Any:
        """Create the executor (None for serial)."""
        from noiselab.executor import executor_from_config

        return executor_from_config(self.type, self.options)


@dataclass(frozen=True)
class ProgressSettings:
    """
    The ``[progress]`` table.

    Attributes:
        style: ``rich``, ``simple`` or ``none``.
        interval: Minimum seconds between progress events.
    """

    style: str = "rich"
    interval: float = 0.25


@dataclass
class ProjectConfig:
    """
    Main project configuration.

    Typical usage::

        config = ProjectConfig.load()
        run_seed = config.run.run_seed()
        for experiment in config.experiments.values():
            ...
    """

    run: RunSettings
    executor: ExecutorSettings
    progress: ProgressSettings
    experiments: dict[str, ExperimentConfig]
    source: Path | None = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, start_dir: Path | None = None, path: Path | None = None) -> ProjectConfig:
        """
        Find and load project configuration.

        Uses *path* if given; otherwise walks up from *start_dir* (default: cwd)
        to locate ``.noiselab.toml``. A ``.noiselab.local.toml`` next to the
        config file is deep-merged on top. With no config file, the built-in
        defaults are used.

        Raises:
            FileNotFoundError: If an explicit *path* does not exist.
            ConfigurationError: If any section is invalid.
        """
        if path is not None:
            config_path: Path | None = Path(path)
            if not config_path.is_file():
                raise FileNotFoundError(f"Config file not found: {config_path}")
        else:
            config_path = find_config_file(start_dir)

        if config_path is None:
            logger.debug("No %s found; using built-in defaults", CONFIG_FILENAME)
            return cls.from_dict({})

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        local_overrides: dict[str, Any] = {}
        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            with open(local_path, "rb") as f:
                local_overrides = tomllib.load(f)
            logger.debug("Applied local overrides from %s", local_path)

        config = cls.from_dict(data, local_overrides=local_overrides)
        config.source = config_path
        logger.info("Loaded configuration from %s", config_path)
        return config

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        local_overrides: dict[str, Any] | None = None,
    ) -> ProjectConfig:
        """
        Create a :class:`ProjectConfig` from a parsed TOML dict.

        If *data* defines an ``[experiments]`` table, it replaces the default
        experiments rather than merging into them.

        Raises:
            ConfigurationError: If any section is invalid.
        """
        defaults = DEFAULT_CONFIG
        if "experiments" in data:
            defaults = {k: v for k, v in DEFAULT_CONFIG.items() if k != "experiments"}
        merged = deep_merge(defaults, data)
        if local_overrides:
            merged = deep_merge(merged, local_overrides)

        # -- run --
        run_raw = merged.get("run", {})
        deterministic = run_raw.get("deterministic", False)
        seed = run_raw.get("seed", 0)
        if not isinstance(deterministic, bool):
            raise ConfigurationError(f"run.deterministic must be a boolean, got {deterministic!r}")
        if isinstance(seed, bool) or not isinstance(seed, int) or seed < 0:
            raise ConfigurationError(f"run.seed must be a non-negative integer, got {seed!r}")
        run = RunSettings(deterministic=deterministic, seed=seed)

        # -- executor --
        executor_raw = dict(merged.get("executor", {}))
        executor_type = executor_raw.pop("type", "process")
        executor = ExecutorSettings(type=executor_type, options=executor_raw)

        # -- progress --
        progress_raw = merged.get("progress", {})
        style = progress_raw.get("style", "rich")
        if style not in PROGRESS_STYLES:
            raise ConfigurationError(
                f"progress.style must be one of {', '.join(PROGRESS_STYLES)}, got {style!r}"
            )
        interval = progress_raw.get("interval", 0.25)
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) or interval < 0:
            raise ConfigurationError(f"progress.interval must be >= 0, got {interval!r}")
        progress = ProgressSettings(style=style, interval=float(interval))

        # -- experiments --
        experiments = {
            name: ExperimentConfig.from_dict(name, dict(raw))
            for name, raw in merged.get("experiments", {}).items()
        }
        if not experiments:
            raise ConfigurationError("No experiments configured")

        return cls(run=run, executor=executor, progress=progress, experiments=experiments)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_experiments(self) -> list[str]:
        return list(self.experiments)

    def select(
        self,
        experiments: Iterable[str] | None = None,
        generators: Iterable[GeneratorKind | str] | None = None,
    ) -> ProjectConfig:
        """
        Return a copy restricted to some experiments and/or generators.

        Raises:
            ConfigurationError: On unknown experiment names, or if a generator
                filter leaves an experiment with nothing to run.
        """
        selected = dict(self.experiments)
        if experiments is not None:
            names = list(experiments)
            unknown = [n for n in names if n not in self.experiments]
            if unknown:
                available = ", ".join(self.experiments) or "(none)"
                raise ConfigurationError(
                    f"Unknown experiment(s) {', '.join(unknown)}. Available: {available}"
                )
            selected = {n: self.experiments[n] for n in names}

        if generators is not None:
            try:
                wanted = [GeneratorKind(g) for g in generators]
            except ValueError as e:
                raise ConfigurationError(str(e)) from None
            selected = {
                name: replace(exp, generators=tuple(g for g in exp.generators if g in wanted))
                for name, exp in selected.items()
            }
            for exp in selected.values():
                exp.validate()

        return replace(self, experiments=selected)

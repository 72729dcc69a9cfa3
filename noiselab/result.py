"""
SuiteResults: Query interface for the results of a suite run.

Provides:
- Collection of ExperimentResult objects in run order
- Tabular view of results
- CSV export
- Filtering by experiment, rule or generator
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, overload

from noiselab.harness import ExperimentResult
from noiselab.seeds.bundle import RunSeed
from noiselab.sequences.registry import GeneratorKind
from noiselab.types import RuleKind


class SuiteResults:
    """
    Results of every experiment/generator pair of one run.

    Example:
        results = run_suite(config, run_seed)
        for result in results.filter(rule="sum"):
            print(result.generator.label, result.mean)

        rows = results.table()
        df = results.table(as_dataframe=True)
    """

    def __init__(
        self,
        results: list[ExperimentResult],
        run_seed: RunSeed | None = None,
        experiment_names: list[str] | None = None,
    ) -> None:
        """
        Initialize the results collection.

        Args:
            results: Experiment results in run order.
            run_seed: The run seed every experiment shared.
            experiment_names: Config experiment name of each result, parallel
                to ``results``. Defaults to the rule name.
        """
        self._results = list(results)
        self.run_seed = run_seed
        if experiment_names is None:
            experiment_names = [r.rule.value for r in self._results]
        if len(experiment_names) != len(self._results):
            raise ValueError("experiment_names must match results one to one")
        self._names = list(experiment_names)

    @property
    def results(self) -> list[ExperimentResult]:
        return list(self._results)

    def rules(self) -> list[RuleKind]:
        """Rules present, in first-seen order."""
        seen: list[RuleKind] = []
        for r in self._results:
            if r.rule not in seen:
                seen.append(r.rule)
        return seen

    def table(self, as_dataframe: bool = False) -> list[dict[str, Any]] | Any:
        """
        Get results as a table, one row per experiment/generator pair.

        Args:
            as_dataframe: If True, return a pandas DataFrame (requires pandas).

        Returns:
            List of dicts by default, or DataFrame if as_dataframe=True.

        Raises:
            ImportError: If as_dataframe=True but pandas is not installed.
        """
        seed = self.run_seed.to_dict() if self.run_seed is not None else {}
        rows = []
        for name, result in zip(self._names, self._results):
            row = {
                "experiment": name,
                **result.to_dict(),
                "run_seed": seed.get("value"),
                "deterministic": seed.get("deterministic"),
            }
            rows.append(row)

        if not as_dataframe:
            return rows

        try:
            import pandas as pd

            return pd.DataFrame(rows)
        except ImportError as e:
            raise ImportError(
                "pandas is required for as_dataframe=True. "
                "Install it with: pip install noiselab[pandas]"
            ) from e

    def to_csv(self, path: str | Path, *, timestamp: bool = False) -> Path:
        """
        Export results to a CSV file.

        Args:
            path: Output path. If a directory, generates a timestamped filename.
            timestamp: Add timestamp to filename if path is a file (default: False).

        Returns:
            Path to the written CSV file.

        Raises:
            ImportError: If pandas is not installed.
        """
        try:
            import pandas as pd
        except ImportError as e:
            raise ImportError(
                "pandas is required for to_csv(). "
                "Install it with: pip install noiselab[pandas]"
            ) from e

        path = Path(path)

        if path.is_dir() or not path.suffix:
            path.mkdir(parents=True, exist_ok=True)
            ts = datetime.now().strftime("%Y%m%d_%H%M%S")
            path = path / f"results_{ts}.csv"
        elif timestamp:
            ts = datetime.now().strftime("%Y%m%d_%H%M%S")
            path = path.with_stem(f"{path.stem}_{ts}")

        path.parent.mkdir(parents=True, exist_ok=True)
        pd.DataFrame(self.table()).to_csv(path, index=False)
        return path

    def filter(
        self,
        experiment: str | None = None,
        rule: RuleKind | str | None = None,
        generator: GeneratorKind | str | None = None,
    ) -> SuiteResults:
        """
        Filter results by experiment name, rule or generator.

        Example:
            results.filter(rule="lottery", generator="golden_ratio")
        """
        rule = RuleKind(rule) if rule is not None else None
        generator = GeneratorKind(generator) if generator is not None else None

        kept = [
            (name, r)
            for name, r in zip(self._names, self._results)
            if (experiment is None or name == experiment)
            and (rule is None or r.rule is rule)
            and (generator is None or r.generator is generator)
        ]
        return SuiteResults(
            [r for _, r in kept],
            run_seed=self.run_seed,
            experiment_names=[n for n, _ in kept],
        )

    @property
    def failed(self) -> SuiteResults:
        """Results with at least one failed bucket."""
        kept = [(n, r) for n, r in zip(self._names, self._results) if r.failed_buckets]
        return SuiteResults(
            [r for _, r in kept],
            run_seed=self.run_seed,
            experiment_names=[n for n, _ in kept],
        )

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ExperimentResult]:
        return iter(self._results)

    @overload
    def __getitem__(self, index: int) -> ExperimentResult: ...
    @overload
    def __getitem__(self, index: slice) -> SuiteResults: ...

    def __getitem__(self, index: int | slice) -> ExperimentResult | SuiteResults:
        if isinstance(index, slice):
            return SuiteResults(
                self._results[index],
                run_seed=self.run_seed,
                experiment_names=self._names[index],
            )
        return self._results[index]

    def __repr__(self) -> str:
        return f"SuiteResults(results={len(self._results)}, run_seed={self.run_seed!r})"

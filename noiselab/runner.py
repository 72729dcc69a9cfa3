"""
Runner: Orchestrates a suite of experiments under one run seed.

The runner:

1. Walks the configured experiments and their generators in order
2. Allocates a disjoint stream index block for every experiment/generator pair
3. Runs each pair through the harness on a shared executor
4. Returns the collected SuiteResults

Every pair reads the same run seed; independence comes from the index blocks,
so no two trials in a run ever share a sub-stream.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from noiselab.harness import ExperimentResult, run_experiment
from noiselab.result import SuiteResults
from noiselab.seeds.bundle import RunSeed
from noiselab.seeds.plan import StreamAllocator

if TYPE_CHECKING:
    from noiselab.config import ProjectConfig
    from noiselab.events import EventCallback
    from noiselab.executor.base import Executor

logger = logging.getLogger(__name__)


def count_pairs(config: ProjectConfig) -> int:
    """Number of experiment/generator pairs a suite run will execute."""
    return sum(len(exp.generators) for exp in config.experiments.values())


def run_suite(
    config: ProjectConfig,
    run_seed: RunSeed | None = None,
    executor: Executor | None = None,
    on_event: EventCallback | None = None,
) -> SuiteResults:
    """
    Run every configured experiment against each of its generators.

    Args:
        config: Project configuration (already selected/filtered).
        run_seed: Seed shared by the whole run. Resolved from ``config.run``
            when omitted.
        executor: Executor for the buckets. None runs buckets inline.
        on_event: Optional event callback, e.g. a progress tracker.

    Returns:
        SuiteResults in configuration order.

    Raises:
        ConfigurationError: If any experiment is invalid; raised before the
            first trial runs.
    """
    for experiment in config.experiments.values():
        experiment.validate()

    if run_seed is None:
        run_seed = config.run.run_seed()
    logger.info(
        "Run seed %d (%s)",
        run_seed.value,
        "deterministic" if run_seed.deterministic else "entropy",
    )

    allocator = StreamAllocator()
    results: list[ExperimentResult] = []
    names: list[str] = []

    for name, experiment in config.experiments.items():
        for generator in experiment.generators:
            indexer = allocator.allocate(
                experiment.outer_trials,
                experiment.inner_trials,
                slots=experiment.rule.slots,
            )
            logger.debug("%s/%s uses %r", name, generator.value, indexer)
            result = run_experiment(
                generator,
                experiment.rule,
                run_seed,
                experiment.outer_trials,
                experiment.inner_trials,
                size=experiment.size,
                threshold=experiment.threshold,
                indexer=indexer,
                executor=executor,
                on_event=on_event,
                progress_interval=config.progress.interval,
            )
            results.append(result)
            names.append(name)

    logger.info("Suite finished: %d experiment/generator pairs", len(results))
    return SuiteResults(results, run_seed=run_seed, experiment_names=names)

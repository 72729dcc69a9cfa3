"""
Experiment harness: hierarchical Monte Carlo over one generator and one rule.

Trials are grouped into ``outer_trials`` buckets of ``inner_trials`` trials.
Buckets are independent tasks handed to an executor; trials inside a bucket run
sequentially and fold into that bucket's own accumulators. When every bucket
is done, bucket accumulators are folded in bucket order into the final
statistics, so the result does not depend on which bucket finished first.
"""

from __future__ import annotations

import logging
import math
import traceback
from concurrent.futures import Future, as_completed
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from noiselab.events import EventCallback, EventEmitter, ProgressThrottle
from noiselab.rules import (
    SequenceExhaustedError,
    map_to_index,
    score_candidates,
    score_derangement,
    score_lottery,
    score_sum_to_threshold,
)
from noiselab.seeds.bundle import RunSeed
from noiselab.seeds.plan import StreamIndexer
from noiselab.sequences.lowdisc import white_noise
from noiselab.sequences.registry import GeneratorKind, generate
from noiselab.stats import RunningStats
from noiselab.types import RuleKind, validate_rule_settings

if TYPE_CHECKING:
    from noiselab.executor.base import Executor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrialSettings:
    """Rule inputs shared by every trial of an experiment (picklable)."""

    rule: RuleKind
    generator: GeneratorKind
    size: int
    threshold: float = 1.0


@dataclass(frozen=True)
class BucketTask:
    """
    Everything one worker needs to run one outer bucket.

    Attributes:
        settings: Rule and generator settings.
        run_seed: The run seed value.
        indexer: Stream index block of the experiment.
        outer_index: The bucket to run.
    """

    settings: TrialSettings
    run_seed: int
    indexer: StreamIndexer
    outer_index: int


@dataclass
class BucketResult:
    """
    Statistics of one finished bucket.

    Attributes:
        outer_index: The bucket this result belongs to.
        stats: One accumulator per outcome name.
        exhausted: Trials whose sequence ran out before scoring completed.
    """

    outer_index: int
    stats: dict[str, RunningStats]
    exhausted: int = 0


def run_trial(
    settings: TrialSettings,
    run_seed: int,
    indexer: StreamIndexer,
    outer: int,
    inner: int,
) -> tuple[float, ...]:
    """
    Draw the sequence(s) for one trial and score them.

    Raises:
        SequenceExhaustedError: If the sum rule runs out of samples.
    """
    rule = settings.rule
    if rule is RuleKind.LOTTERY:
        winner_stream = indexer.index(outer, inner, 0)
        winning_index = int(map_to_index(white_noise(1, winner_stream, run_seed)[0], settings.size))
        samples = generate(settings.generator, settings.size, indexer.index(outer, inner, 1), run_seed)
        return (score_lottery(samples, winning_index, settings.size),)

    samples = generate(settings.generator, settings.size, indexer.index(outer, inner, 0), run_seed)
    if rule is RuleKind.SUM_TO_THRESHOLD:
        return (score_sum_to_threshold(samples, settings.threshold),)
    if rule is RuleKind.CANDIDATES:
        return score_candidates(samples)
    if rule is RuleKind.DERANGEMENT:
        return (score_derangement(samples),)
    raise ValueError(f"Unsupported rule: {rule!r}")


def run_bucket(task: BucketTask) -> BucketResult:
    """
    Run every inner trial of one bucket (top-level, pickle-safe).

    Exhausted trials are counted and left out of the statistics.
    """
    settings = task.settings
    names = settings.rule.outcome_names
    stats = {name: RunningStats() for name in names}
    exhausted = 0

    for inner in range(task.indexer.inner_trials):
        try:
            outcome = run_trial(settings, task.run_seed, task.indexer, task.outer_index, inner)
        except SequenceExhaustedError as e:
            exhausted += 1
            logger.debug("bucket %d trial %d exhausted: %s", task.outer_index, inner, e)
            continue
        for name, value in zip(names, outcome):
            stats[name].add(value)

    return BucketResult(outer_index=task.outer_index, stats=stats, exhausted=exhausted)


@dataclass
class ExperimentResult:
    """
    Converged statistics of one generator under one rule.

    Attributes:
        experiment_id: ``"<rule>/<generator>"`` label.
        rule: The scoring rule.
        generator: The generator under test.
        stats: Final accumulator per outcome name.
        trials: Trials attempted (outer x inner).
        exhausted: Trials excluded because their sequence ran out.
        failed_buckets: Buckets that raised and were excluded.
        errors: Error messages of failed buckets.
        indexer: The stream block the experiment used.
    """

    experiment_id: str
    rule: RuleKind
    generator: GeneratorKind
    stats: dict[str, RunningStats]
    trials: int
    exhausted: int = 0
    failed_buckets: int = 0
    errors: list[str] = field(default_factory=list)
    indexer: StreamIndexer | None = None

    @property
    def primary(self) -> str:
        return self.rule.outcome_names[0]

    @property
    def mean(self) -> float:
        """Mean of the primary outcome (NaN if nothing was scored)."""
        stats = self.stats[self.primary]
        return stats.mean if stats.count else math.nan

    @property
    def std_dev(self) -> float:
        """Standard deviation of the primary outcome."""
        return self.stats[self.primary].std_dev

    @property
    def loss_percentage(self) -> float | None:
        """Percentage of lottery trials with no winning ticket."""
        if self.rule is not RuleKind.LOTTERY:
            return None
        return 100.0 * (1.0 - self.mean)

    @property
    def expected(self) -> float | None:
        return self.rule.expected

    @property
    def scored(self) -> int:
        return self.stats[self.primary].count

    def to_dict(self) -> dict[str, Any]:
        row: dict[str, Any] = {
            "experiment_id": self.experiment_id,
            "rule": self.rule.value,
            "generator": self.generator.value,
            "trials": self.trials,
            "scored": self.scored,
            "exhausted": self.exhausted,
            "failed_buckets": self.failed_buckets,
            "mean": self.mean,
            "std_dev": self.std_dev,
            "expected": self.expected,
        }
        if self.rule is RuleKind.LOTTERY:
            row["loss_percentage"] = self.loss_percentage
        for name, stats in self.stats.items():
            if name != self.primary:
                row[f"{name}_mean"] = stats.mean
                row[f"{name}_std_dev"] = stats.std_dev
        return row


def _collect(
    futures: list[Future[BucketResult]],
    emitter: EventEmitter,
    throttle: ProgressThrottle,
) -> tuple[dict[int, BucketResult], list[str]]:
    """Gather bucket results as they complete, isolating failures."""
    index_of = {id(f): i for i, f in enumerate(futures)}
    results: dict[int, BucketResult] = {}
    errors: list[str] = []
    done = 0

    for future in as_completed(futures):
        bucket = index_of[id(future)]
        try:
            result = future.result()
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            logger.error("bucket %d failed: %s", bucket, message)
            logger.debug("%s", "".join(traceback.format_exception(e)))
            errors.append(message)
            emitter.bucket_failed(bucket, message)
        else:
            results[bucket] = result
            emitter.bucket_finished(bucket, exhausted=result.exhausted)
        done += 1
        if emitter.enabled and throttle.should_emit(done):
            emitter.progress(done, len(futures))

    return results, errors


def _run_inline(
    tasks: list[BucketTask],
    emitter: EventEmitter,
    throttle: ProgressThrottle,
) -> tuple[dict[int, BucketResult], list[str]]:
    results: dict[int, BucketResult] = {}
    errors: list[str] = []
    for done, task in enumerate(tasks, start=1):
        try:
            results[task.outer_index] = run_bucket(task)
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            logger.error("bucket %d failed: %s", task.outer_index, message)
            errors.append(message)
            emitter.bucket_failed(task.outer_index, message)
        else:
            emitter.bucket_finished(task.outer_index, exhausted=results[task.outer_index].exhausted)
        if emitter.enabled and throttle.should_emit(done):
            emitter.progress(done, len(tasks))
    return results, errors


def run_experiment(
    generator: GeneratorKind | str,
    rule: RuleKind | str,
    run_seed: RunSeed | int,
    outer_trials: int,
    inner_trials: int,
    *,
    size: int | None = None,
    threshold: float = 1.0,
    indexer: StreamIndexer | None = None,
    executor: Executor | None = None,
    on_event: EventCallback | None = None,
    progress_interval: float = 0.25,
) -> ExperimentResult:
    """
    Run ``outer_trials x inner_trials`` trials of one generator under one rule.

    Args:
        generator: Generator under test.
        rule: Scoring rule.
        run_seed: The run seed (read-only, shared by every bucket).
        outer_trials: Number of buckets (the unit of parallelism).
        inner_trials: Trials per bucket.
        size: Rule size (win frequency, draw size, candidate pool, deck size).
            Defaults to the rule's default size.
        threshold: Target sum for the sum rule.
        indexer: Stream index block. Defaults to a block starting at 0; pass an
            allocated block when several experiments share a run seed.
        executor: Thread or process executor. None runs buckets inline.
        on_event: Optional event callback for progress and bucket reports.
        progress_interval: Minimum seconds between progress events.

    Returns:
        The converged ExperimentResult.

    Raises:
        ConfigurationError: On degenerate settings, before any trial runs.
    """
    generator = GeneratorKind(generator)
    rule = RuleKind(rule)
    size = rule.default_size if size is None else size
    validate_rule_settings(
        rule,
        outer_trials=outer_trials,
        inner_trials=inner_trials,
        size=size,
        threshold=threshold,
    )
    if indexer is None:
        indexer = StreamIndexer(0, outer_trials, inner_trials, rule.slots)
    elif (indexer.outer_trials, indexer.inner_trials, indexer.slots) != (
        outer_trials,
        inner_trials,
        rule.slots,
    ):
        raise ValueError(f"{indexer!r} does not match {outer_trials}x{inner_trials} {rule.value} trials")

    experiment_id = f"{rule.value}/{generator.value}"
    seed_value = int(run_seed)
    settings = TrialSettings(rule=rule, generator=generator, size=size, threshold=threshold)
    tasks = [
        BucketTask(settings=settings, run_seed=seed_value, indexer=indexer, outer_index=outer)
        for outer in range(outer_trials)
    ]

    emitter = EventEmitter(on_event, experiment_id=experiment_id)
    throttle = ProgressThrottle(total=outer_trials, min_interval=progress_interval)
    emitter.experiment_started(
        rule=rule.value,
        generator=generator.value,
        buckets=outer_trials,
        trials=outer_trials * inner_trials,
    )
    logger.info(
        "Running %s: %d buckets x %d trials (size=%d)",
        experiment_id,
        outer_trials,
        inner_trials,
        size,
    )

    if executor is None:
        results, errors = _run_inline(tasks, emitter, throttle)
    else:
        futures = executor.submit(run_bucket, tasks)
        results, errors = _collect(futures, emitter, throttle)

    names = rule.outcome_names
    final = {name: RunningStats() for name in names}
    exhausted = 0
    for outer in sorted(results):
        bucket = results[outer]
        exhausted += bucket.exhausted
        for name in names:
            final[name].merge(bucket.stats[name])

    if exhausted:
        message = f"{exhausted} of {outer_trials * inner_trials} trials ran out of samples and were excluded"
        logger.warning("%s: %s", experiment_id, message)
        emitter.log(message, level="warning")

    result = ExperimentResult(
        experiment_id=experiment_id,
        rule=rule,
        generator=generator,
        stats=final,
        trials=outer_trials * inner_trials,
        exhausted=exhausted,
        failed_buckets=len(errors),
        errors=errors,
        indexer=indexer,
    )
    emitter.experiment_finished(
        mean=result.mean,
        std_dev=result.std_dev,
        exhausted=exhausted,
        failed_buckets=len(errors),
    )
    return result

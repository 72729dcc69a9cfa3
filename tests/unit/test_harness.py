"""Tests for the experiment harness."""

from __future__ import annotations

import math

import pytest

import noiselab.harness as harness
from noiselab.events import EventKind
from noiselab.executor import ThreadExecutor
from noiselab.harness import BucketTask, TrialSettings, run_bucket, run_experiment, run_trial
from noiselab.seeds import RunSeed, StreamIndexer
from noiselab.sequences import GeneratorKind
from noiselab.types import ConfigurationError, RuleKind

SEED = RunSeed.fixed(1234)


class TestRunTrial:
    def test_lottery_uses_two_slots(self):
        settings = TrialSettings(RuleKind.LOTTERY, GeneratorKind.STRATIFIED, size=2)
        indexer = StreamIndexer(0, 1, 1, slots=2)
        assert run_trial(settings, 1, indexer, 0, 0) == (1.0,)

    def test_candidates_returns_two_outcomes(self):
        settings = TrialSettings(RuleKind.CANDIDATES, GeneratorKind.WHITE, size=20)
        indexer = StreamIndexer(0, 1, 1)
        index, rank = run_trial(settings, 1, indexer, 0, 0)
        assert 7 <= index <= 19
        assert 0 <= rank < 20


class TestRunBucket:
    def test_counts_exhausted_trials(self):
        """A single sample never reaches 1.0, so every trial is exhausted."""
        settings = TrialSettings(RuleKind.SUM_TO_THRESHOLD, GeneratorKind.WHITE, size=1)
        task = BucketTask(settings, run_seed=5, indexer=StreamIndexer(0, 2, 6), outer_index=1)
        result = run_bucket(task)
        assert result.outer_index == 1
        assert result.exhausted == 6
        assert result.stats["count"].count == 0


class TestRunExperiment:
    def test_sum_mean_near_e(self):
        """White noise should need about e samples to reach 1."""
        result = run_experiment("white", "sum", SEED, outer_trials=20, inner_trials=100)
        assert result.trials == 2000
        assert result.scored + result.exhausted == 2000
        assert result.mean == pytest.approx(math.e, abs=0.15)
        assert result.expected == pytest.approx(math.e)

    def test_stratified_lottery_always_wins(self):
        """Two stratified tickets cover both indices of a 2-way lottery."""
        result = run_experiment("stratified", "lottery", SEED, 5, 4, size=2)
        assert result.mean == 1.0
        assert result.std_dev == 0.0
        assert result.loss_percentage == 0.0

    def test_loss_percentage_only_for_lottery(self):
        result = run_experiment("white", "derangement", SEED, 2, 5, size=10)
        assert result.loss_percentage is None

    def test_candidates_reports_index_and_rank(self):
        result = run_experiment("white", "candidates", SEED, 3, 10, size=30)
        assert set(result.stats) == {"index", "rank"}
        assert result.primary == "index"
        row = result.to_dict()
        assert "rank_mean" in row
        assert row["rule"] == "candidates"

    def test_deterministic(self):
        a = run_experiment("golden_ratio", "sum", SEED, 4, 10)
        b = run_experiment("golden_ratio", "sum", SEED, 4, 10)
        assert a.mean == b.mean
        assert a.std_dev == b.std_dev

    def test_all_trials_exhausted(self):
        result = run_experiment("white", "sum", SEED, 3, 4, size=1)
        assert result.exhausted == 12
        assert result.scored == 0
        assert math.isnan(result.mean)

    def test_partial_exhaustion_excluded(self):
        """Two samples reach 1.0 about half the time; misses are excluded."""
        result = run_experiment("white", "sum", SEED, 10, 20, size=2)
        assert 0 < result.exhausted < 200
        assert result.scored == 200 - result.exhausted
        assert result.mean == 2.0

    def test_invalid_settings_rejected_before_running(self):
        events = []
        with pytest.raises(ConfigurationError):
            run_experiment("white", "candidates", SEED, 2, 2, size=2, on_event=events.append)
        assert events == []

    def test_zero_trials_rejected(self):
        with pytest.raises(ConfigurationError):
            run_experiment("white", "sum", SEED, 0, 10)

    def test_unknown_generator(self):
        with pytest.raises(ValueError):
            run_experiment("pink", "sum", SEED, 1, 1)

    def test_indexer_must_match(self):
        with pytest.raises(ValueError, match="does not match"):
            run_experiment("white", "lottery", SEED, 2, 2, size=10, indexer=StreamIndexer(0, 2, 2, slots=1))

    def test_events(self):
        events = []
        run_experiment("white", "sum", SEED, 5, 3, on_event=events.append, progress_interval=0.0)
        kinds = [e.kind for e in events]
        assert kinds[0] == EventKind.EXPERIMENT_STARTED
        assert kinds[-1] == EventKind.EXPERIMENT_FINISHED
        assert kinds.count(EventKind.BUCKET_FINISHED) == 5
        assert EventKind.PROGRESS in kinds
        assert all(e.experiment_id == "sum/white" for e in events)
        assert events[0].payload["buckets"] == 5

    def test_exhaustion_emits_warning_log(self):
        events = []
        run_experiment("white", "sum", SEED, 2, 2, size=1, on_event=events.append)
        logs = [e for e in events if e.kind == EventKind.LOG]
        assert logs and logs[0].payload["level"] == "warning"


class TestBucketFailures:
    @pytest.fixture
    def flaky_trial(self, monkeypatch):
        real = harness.run_trial

        def run_trial(settings, run_seed, indexer, outer, inner):
            if outer == 1:
                raise RuntimeError("boom")
            return real(settings, run_seed, indexer, outer, inner)

        monkeypatch.setattr(harness, "run_trial", run_trial)

    def test_inline_failure_isolated(self, flaky_trial):
        events = []
        result = run_experiment("white", "sum", SEED, 3, 5, on_event=events.append)
        assert result.failed_buckets == 1
        assert result.errors == ["RuntimeError: boom"]
        assert result.scored + result.exhausted == 10
        failed = [e for e in events if e.kind == EventKind.BUCKET_FAILED]
        assert [e.payload["bucket"] for e in failed] == [1]

    def test_thread_failure_isolated(self, flaky_trial):
        with ThreadExecutor(max_workers=2) as executor:
            result = run_experiment("white", "sum", SEED, 4, 5, executor=executor)
        assert result.failed_buckets == 1
        assert result.scored + result.exhausted == 15

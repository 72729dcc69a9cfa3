"""Tests for running statistics."""

from __future__ import annotations

import math

import numpy as np
import pytest

from noiselab.stats import RunningStats, fold


class TestRunningStats:
    def test_running_mean_matches_arithmetic_mean(self):
        """Folding 1,000 values in any order should give the arithmetic mean."""
        rng = np.random.default_rng(0)
        values = rng.random(1000) * 10.0
        means = []
        for _ in range(5):
            stats = RunningStats.of(rng.permutation(values))
            means.append(stats.mean)
            assert stats.mean == pytest.approx(values.mean(), abs=1e-4)
            assert stats.count == 1000
        assert max(means) - min(means) < 1e-4

    def test_variance(self):
        stats = RunningStats.of([1.0, 2.0, 3.0, 4.0])
        assert stats.mean == pytest.approx(2.5)
        assert stats.mean_sq == pytest.approx(7.5)
        assert stats.variance == pytest.approx(1.25)
        assert stats.std_dev == pytest.approx(math.sqrt(1.25))

    def test_constant_values_zero_variance(self):
        """Rounding must never produce a negative variance."""
        stats = RunningStats.of([0.1] * 1000)
        assert stats.variance >= 0.0
        assert stats.std_dev == pytest.approx(0.0, abs=1e-7)

    def test_empty(self):
        stats = RunningStats()
        assert stats.count == 0
        assert math.isnan(stats.variance)

    def test_to_dict(self):
        d = RunningStats.of([1.0, 3.0]).to_dict()
        assert d["count"] == 2
        assert d["mean"] == pytest.approx(2.0)
        assert d["std_dev"] == pytest.approx(1.0)


class TestMerge:
    def test_merge_equals_single_pass(self):
        values = np.random.default_rng(1).random(300)
        a = RunningStats.of(values[:100])
        b = RunningStats.of(values[100:])
        a.merge(b)
        whole = RunningStats.of(values)
        assert a.count == whole.count
        assert a.mean == pytest.approx(whole.mean, abs=1e-12)
        assert a.mean_sq == pytest.approx(whole.mean_sq, abs=1e-12)

    def test_equal_buckets_use_per_bucket_rule(self):
        """With equal counts, merging is acc += (m - acc) / k over bucket means."""
        buckets = [RunningStats.of([x, x + 1.0]) for x in (0.0, 4.0, 8.0)]
        acc = 0.0
        for k, bucket in enumerate(buckets, start=1):
            acc += (bucket.mean - acc) / k
        assert fold(buckets).mean == pytest.approx(acc)

    def test_merge_empty_is_noop(self):
        stats = RunningStats.of([1.0, 2.0])
        stats.merge(RunningStats())
        assert stats.count == 2
        assert stats.mean == pytest.approx(1.5)

    def test_merge_into_empty(self):
        stats = RunningStats()
        stats.merge(RunningStats.of([5.0, 7.0]))
        assert stats.count == 2
        assert stats.mean == pytest.approx(6.0)

    def test_fold_order_independent(self):
        rng = np.random.default_rng(2)
        buckets = [RunningStats.of(rng.random(rng.integers(1, 20))) for _ in range(50)]
        forward = fold(buckets)
        backward = fold(reversed(buckets))
        assert forward.count == backward.count
        assert forward.mean == pytest.approx(backward.mean, abs=1e-12)

"""Tests for scoring rules."""

from __future__ import annotations

import numpy as np
import pytest

from noiselab.rules import (
    SequenceExhaustedError,
    map_to_index,
    score_candidates,
    score_derangement,
    score_lottery,
    score_sum_to_threshold,
)
from noiselab.sequences._unit import ONE_BELOW


class TestMapToIndex:
    def test_basic(self):
        np.testing.assert_array_equal(map_to_index(np.array([0.0, 0.49, 0.5, 0.99]), 2), [0, 0, 1, 1])

    def test_largest_value_clamped(self):
        assert int(map_to_index(ONE_BELOW, 10)) == 9
        assert int(map_to_index(ONE_BELOW, 2**32)) == 2**32 - 1


class TestLottery:
    @pytest.mark.parametrize("winner", [0, 1])
    def test_covering_samples_always_win(self, winner):
        """N=2 with one sample in each half should always win."""
        assert score_lottery(np.array([0.25, 0.75]), winner, 2) == 1.0

    def test_miss(self):
        assert score_lottery(np.array([0.1, 0.2, 0.3]), 9, 10) == 0.0


class TestSumToThreshold:
    def test_count(self):
        """0.5 + 0.3 < 1, + 0.4 >= 1: three samples."""
        assert score_sum_to_threshold(np.array([0.5, 0.3, 0.4, 0.9])) == 3.0

    def test_reaching_threshold_exactly_counts(self):
        assert score_sum_to_threshold(np.array([0.5, 0.5, 0.5])) == 2.0

    def test_custom_threshold(self):
        assert score_sum_to_threshold(np.array([0.9, 0.9, 0.9]), threshold=2.0) == 3.0

    def test_exhaustion(self):
        with pytest.raises(SequenceExhaustedError) as excinfo:
            score_sum_to_threshold(np.array([0.2, 0.3]))
        assert excinfo.value.length == 2
        assert excinfo.value.total == pytest.approx(0.5)
        assert excinfo.value.threshold == 1.0


class TestCandidates:
    def test_literal_case(self):
        """[0.2, 0.9, 0.3, 0.5]: explore one, pick 0.9 at index 1, best overall."""
        assert score_candidates(np.array([0.2, 0.9, 0.3, 0.5])) == (1.0, 0.0)

    def test_rank_counts_strictly_greater(self):
        assert score_candidates(np.array([0.5, 0.6, 0.9, 0.1])) == (1.0, 1.0)

    def test_fallback_to_last_index(self):
        """Nothing beats the explored maximum: index K-1, value = explored max."""
        assert score_candidates(np.array([0.9, 0.1, 0.2, 0.3])) == (3.0, 0.0)

    def test_exploration_length(self):
        """K=10 explores int(10/e) = 3 values."""
        samples = np.array([0.1, 0.2, 0.95, 0.9, 0.97, 0.5, 0.4, 0.3, 0.2, 0.1])
        assert score_candidates(samples) == (4.0, 0.0)

    def test_too_few_candidates(self):
        with pytest.raises(ValueError):
            score_candidates(np.array([0.1, 0.2]))


class TestDerangement:
    def test_swap_is_derangement(self):
        assert score_derangement(np.array([0.2, 0.1])) == 1.0

    def test_identity_is_not(self):
        assert score_derangement(np.array([0.1, 0.2, 0.3])) == 0.0

    def test_cycle_is_derangement(self):
        assert score_derangement(np.array([0.3, 0.1, 0.2])) == 1.0

    def test_one_fixed_point(self):
        assert score_derangement(np.array([0.3, 0.2, 0.1])) == 0.0

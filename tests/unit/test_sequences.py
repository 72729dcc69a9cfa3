"""Tests for white noise, low-discrepancy generators and the registry."""

from __future__ import annotations

import numpy as np
import pytest

from noiselab.sequences import (
    GOLDEN_RATIO_CONJUGATE,
    GeneratorKind,
    generate,
    get_generator,
    golden_ratio,
    list_generators,
    regular_offset,
    regular_offset_shuffled,
    stratified,
    stratified_shuffled,
    white_noise,
)
from noiselab.sequences._unit import ONE_BELOW, clamp_unit


class TestWhiteNoise:
    def test_length_and_range(self):
        values = white_noise(1000, stream_index=1, run_seed=2)
        assert values.shape == (1000,)
        assert values.min() >= 0.0
        assert values.max() < 1.0

    def test_zero_count_rejected(self):
        with pytest.raises(ValueError):
            white_noise(0, 0, 0)


class TestGoldenRatio:
    def test_recurrence(self):
        """Consecutive values should differ by 1/phi modulo 1."""
        values = golden_ratio(500, stream_index=4, run_seed=8)
        step = np.mod(values[1:] - values[:-1] - GOLDEN_RATIO_CONJUGATE, 1.0)
        circular = np.minimum(step, 1.0 - step)
        assert circular.max() < 1e-9

    def test_starts_at_white_noise_draw(self):
        """The first value should be the stream's first white noise draw."""
        values = golden_ratio(5, stream_index=4, run_seed=8)
        assert values[0] == white_noise(1, stream_index=4, run_seed=8)[0]

    def test_range(self):
        values = golden_ratio(10_000, stream_index=0, run_seed=0)
        assert values.min() >= 0.0
        assert values.max() < 1.0


class TestStratified:
    def test_one_sample_per_stratum(self):
        """Value i should fall in [i/n, (i+1)/n)."""
        n = 200
        values = stratified(n, stream_index=3, run_seed=5)
        strata = np.floor(values * n).astype(int)
        np.testing.assert_array_equal(strata, np.arange(n))

    def test_shuffled_same_multiset(self):
        """Shuffled stratified should hold exactly the stratified values."""
        plain = stratified(300, stream_index=6, run_seed=1)
        shuffled = stratified_shuffled(300, stream_index=6, run_seed=1)
        np.testing.assert_array_equal(np.sort(shuffled), plain)

    def test_shuffled_not_ascending(self):
        shuffled = stratified_shuffled(300, stream_index=6, run_seed=1)
        assert not np.all(np.diff(shuffled) > 0)


class TestRegularOffset:
    def test_even_spacing(self):
        """Sorted values should be exactly 1/n apart."""
        n = 64
        values = regular_offset(n, stream_index=2, run_seed=3)
        np.testing.assert_allclose(np.diff(values), 1.0 / n, atol=1e-12)

    def test_shuffled_same_multiset(self):
        plain = regular_offset(100, stream_index=2, run_seed=3)
        shuffled = regular_offset_shuffled(100, stream_index=2, run_seed=3)
        np.testing.assert_array_equal(np.sort(shuffled), plain)


class TestClamp:
    def test_clamps_to_largest_float_below_one(self):
        values = clamp_unit(np.array([-0.1, 0.5, 1.0, 1.5]))
        assert values[0] == 0.0
        assert values[1] == 0.5
        assert values[2] == ONE_BELOW
        assert values[3] == ONE_BELOW
        assert ONE_BELOW < 1.0


class TestRegistry:
    def test_every_kind_registered(self):
        for kind in GeneratorKind:
            assert callable(get_generator(kind))

    def test_lookup_by_name(self):
        assert get_generator("golden_ratio") is golden_ratio

    def test_unknown_generator(self):
        with pytest.raises(ValueError, match="Available generators"):
            get_generator("pink")

    @pytest.mark.parametrize("kind", list(GeneratorKind))
    def test_generate_shape_and_range(self, kind):
        values = generate(kind, 100, stream_index=12, run_seed=34)
        assert values.shape == (100,)
        assert values.min() >= 0.0
        assert values.max() < 1.0

    def test_list_generators(self):
        kinds = list_generators()
        assert GeneratorKind.WHITE in kinds
        assert len(kinds) == len(GeneratorKind)

    def test_labels(self):
        assert GeneratorKind.GOLDEN_RATIO.label == "Golden Ratio"
        assert all(kind.label for kind in GeneratorKind)

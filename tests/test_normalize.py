"""Tests for intensity range reduction and normalization."""

import numpy as np
import pytest

from fractal.normalize import DEGENERATE_LEVEL, IntensityRange, normalize, reduce_ranges


class TestIntensityRange:
    def test_observe(self):
        assert IntensityRange.observe(np.array([[7, 3], [200, 9]], dtype=np.uint8)) == IntensityRange(3, 200)

    def test_observe_empty_block(self):
        with pytest.raises(ValueError):
            IntensityRange.observe(np.array([], dtype=np.uint8))

    def test_merge(self):
        assert IntensityRange(10, 20).merge(IntensityRange(5, 15)) == IntensityRange(5, 20)

    def test_reduce_matches_whole_image(self):
        rng = np.random.default_rng(7)
        image = rng.integers(0, 256, size=(12, 12)).astype(np.uint8)
        partials = [IntensityRange.observe(image[start:start + 4]) for start in range(0, 12, 4)]

        assert reduce_ranges(partials) == IntensityRange.observe(image)

    def test_reduce_single_partial(self):
        assert reduce_ranges([IntensityRange(4, 4)]) == IntensityRange(4, 4)

    def test_reduce_nothing(self):
        with pytest.raises(ValueError):
            reduce_ranges([])

    def test_degenerate(self):
        assert IntensityRange(9, 9).degenerate
        assert not IntensityRange(9, 10).degenerate


class TestNormalize:
    def test_stretches_to_full_range(self):
        raw = np.array([10, 20, 30], dtype=np.uint8)

        assert normalize(raw, IntensityRange(10, 30)).tolist() == [0, 128, 255]

    def test_monotonic(self):
        raw = np.arange(10, 201, dtype=np.uint8)
        levels = normalize(raw, IntensityRange(10, 200)).astype(int)

        assert np.all(np.diff(levels) >= 0)
        assert levels[0] == 0
        assert levels[-1] == 255

    def test_clamps_outside_range(self):
        raw = np.array([0, 50, 255], dtype=np.uint8)

        assert normalize(raw, IntensityRange(20, 100)).tolist() == [0, 96, 255]

    def test_degenerate_range_uses_fallback(self):
        raw = np.full((3, 5), 42, dtype=np.uint8)
        levels = normalize(raw, IntensityRange(42, 42))

        assert levels.shape == (3, 5)
        assert levels.dtype == np.uint8
        assert np.all(levels == DEGENERATE_LEVEL)

    def test_preserves_shape(self):
        raw = np.arange(12, dtype=np.uint8).reshape(3, 4)

        assert normalize(raw, IntensityRange(0, 11)).shape == (3, 4)

"""Tests for the two-pass renderer."""

import numpy as np
import pytest

from fractal.config import ChannelMode, FixedBounds, resolve_config
from fractal.escape import evaluate
from fractal.normalize import DEGENERATE_LEVEL, IntensityRange, normalize
from fractal.renderer import render, split_rows
from fractal.viewport import sample_rows


def _classic(**overrides):
    overrides.setdefault("size", 24)
    overrides.setdefault("workers", 3)
    return resolve_config("classic", **overrides)


class TestSplitRows:
    def test_bands_cover_every_row(self):
        bands = split_rows(10, 3)

        assert bands[0][0] == 0
        assert bands[-1][1] == 10
        for (_, stop), (start, _) in zip(bands, bands[1:]):
            assert stop == start

    def test_more_workers_than_rows(self):
        assert split_rows(2, 8) == [(0, 1), (1, 2)]

    def test_single_worker(self):
        assert split_rows(7, 1) == [(0, 7)]


class TestRender:
    def test_gray_buffer(self):
        result = render(_classic())

        assert result.pixels.shape == (24, 24)
        assert result.pixels.dtype == np.uint8
        assert result.raw.shape == (24, 24)

    def test_rgb_buffer(self):
        result = render(resolve_config(size=16, workers=2))

        assert result.pixels.shape == (16, 16, 3)
        assert result.pixels.dtype == np.uint8

    def test_raw_matches_evaluator(self):
        result = render(_classic())
        cx, cy = sample_rows(result.bounds, 0, 24)

        assert np.array_equal(result.raw, evaluate(cx, cy, 40, 100.0))

    def test_range_is_global(self):
        result = render(_classic())

        assert result.intensity_range == IntensityRange.observe(result.raw)

    def test_normalized_uses_full_range(self):
        result = render(_classic())

        assert result.pixels.min() == 0
        assert result.pixels.max() == 255

    def test_normalization_is_monotonic(self):
        result = render(_classic())
        order = np.argsort(result.raw, axis=None, kind="stable")

        assert np.all(np.diff(result.pixels.ravel()[order].astype(int)) >= 0)

    def test_deterministic(self):
        first = render(_classic())
        second = render(_classic())

        assert first.pixels.tobytes() == second.pixels.tobytes()

    @pytest.mark.parametrize("workers", [1, 2, 5, 24])
    def test_independent_of_worker_count(self, workers):
        reference = render(_classic(workers=1))

        assert np.array_equal(render(_classic(workers=workers)).pixels, reference.pixels)

    def test_degenerate_image(self):
        result = render(resolve_config(size=8, max_iterations=1, threshold=1000.0, workers=2))

        assert result.intensity_range.degenerate
        assert np.all(result.pixels == DEGENERATE_LEVEL)

    def test_viewport_inside_set_is_degenerate(self):
        cfg = resolve_config(viewport=FixedBounds(-0.1, 0.1, -0.1, 0.1), size=6, channels="gray", workers=2)
        result = render(cfg)

        assert np.all(result.pixels == DEGENERATE_LEVEL)

    def test_crosshairs(self):
        cfg = resolve_config(viewport=FixedBounds(-2.2, 1.0, -1.6, 1.6), size=4, crosshairs=True, workers=2)
        result = render(cfg)
        levels = normalize(result.raw, result.intensity_range)

        for y in range(4):
            for x in range(4):
                n = int(levels[y, x])
                expected = [0, n, 255 - n] if (x == 2 or y == 2) else [n, n, n]
                assert result.pixels[y, x].tolist() == expected

    def test_gray_channel_mode(self):
        result = render(resolve_config(size=8, channels=ChannelMode.GRAY, workers=2))

        assert result.pixels.ndim == 2

    def test_gray_mode_ignores_crosshairs(self):
        plain = render(_classic())
        marked = render(_classic(crosshairs=True))

        assert np.array_equal(marked.pixels, plain.pixels)

"""Two-pass parallel rendering of a Mandelbrot image."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .compose import compose
from .config import ChannelMode, RenderConfig
from .escape import evaluate
from .normalize import IntensityRange, normalize, reduce_ranges
from .viewport import ViewportBounds, sample_rows


@dataclass(frozen=True)
class RenderResult:
    """Container for the buffers produced by a render."""

    pixels: np.ndarray
    raw: np.ndarray
    intensity_range: IntensityRange
    bounds: ViewportBounds


def split_rows(size: int, workers: int) -> list[tuple[int, int]]:
    """Split ``size`` rows into at most ``workers`` contiguous bands."""

    bands = max(1, min(int(workers), int(size)))
    edges = np.linspace(0, size, bands + 1).round().astype(int)
    return [(int(start), int(stop)) for start, stop in zip(edges[:-1], edges[1:]) if stop > start]


def render(config: RenderConfig, *, device: Optional[str] = None) -> RenderResult:
    """Render ``config`` and return the finished pixel buffer.

    Pass 1 evaluates each band of rows and records the band's own intensity
    range; the partial ranges are reduced once every band is done. Pass 2
    normalizes and composes each band from the global range.
    """

    bounds = ViewportBounds.from_viewport(config.viewport, config.size)
    size = bounds.size
    bands = split_rows(size, config.workers)

    raw = np.empty((size, size), dtype=np.uint8)
    if config.channels is ChannelMode.GRAY:
        pixels = np.empty((size, size), dtype=np.uint8)
    else:
        pixels = np.empty((size, size, 3), dtype=np.uint8)

    def evaluate_band(band: tuple[int, int]) -> IntensityRange:
        start, stop = band
        cx, cy = sample_rows(bounds, start, stop)
        block = evaluate(cx, cy, config.max_iterations, config.threshold, device=device)
        raw[start:stop] = block
        return IntensityRange.observe(block)

    def compose_band(band: tuple[int, int], intensity_range: IntensityRange) -> None:
        start, stop = band
        levels = normalize(raw[start:stop], intensity_range)
        pixels[start:stop] = compose(
            levels,
            config.channels,
            crosshairs=config.crosshairs,
            size=size,
            row_offset=start,
        )

    with ThreadPoolExecutor(max_workers=len(bands)) as pool:
        intensity_range = reduce_ranges(pool.map(evaluate_band, bands))
        list(pool.map(lambda band: compose_band(band, intensity_range), bands))

    return RenderResult(pixels=pixels, raw=raw, intensity_range=intensity_range, bounds=bounds)

"""Mapping between the pixel grid and the complex plane."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .config import Viewport, check_size, resolve_bounds


@dataclass(frozen=True)
class ViewportBounds:
    """Resolved bounds of the sampled region and the per-pixel step."""

    cxmin: float
    cxmax: float
    cymin: float
    cymax: float
    size: int

    @property
    def scalex(self) -> float:
        return float((np.float64(self.cxmax) - np.float64(self.cxmin)) / np.float64(self.size))

    @property
    def scaley(self) -> float:
        return float((np.float64(self.cymax) - np.float64(self.cymin)) / np.float64(self.size))

    @classmethod
    def from_viewport(cls, viewport: Viewport, size: int) -> "ViewportBounds":
        check_size(size)
        cxmin, cxmax, cymin, cymax = resolve_bounds(viewport)
        return cls(cxmin=cxmin, cxmax=cxmax, cymin=cymin, cymax=cymax, size=int(size))


def pixel_to_complex(bounds: ViewportBounds, x: int, y: int) -> tuple[float, float]:
    """Map pixel column ``x`` and row ``y`` to the sampled complex point."""

    cx = np.float64(bounds.cxmin) + np.float64(x) * np.float64(bounds.scalex)
    cy = np.float64(bounds.cymin) + np.float64(y) * np.float64(bounds.scaley)
    return float(cx), float(cy)


def sample_rows(bounds: ViewportBounds, start: int, stop: int) -> tuple[np.ndarray, np.ndarray]:
    """Sample grids for rows ``start`` to ``stop - 1`` and every column.

    Returns ``(cx, cy)`` arrays of shape ``(stop - start, size)``.
    """

    cols = np.arange(bounds.size, dtype=np.float64)
    rows = np.arange(start, stop, dtype=np.float64)
    x = np.float64(bounds.cxmin) + cols * np.float64(bounds.scalex)
    y = np.float64(bounds.cymin) + rows * np.float64(bounds.scaley)
    cx, cy = np.meshgrid(x, y)
    return cx, cy
